"""ZIP archive access: entry enumeration and per-entry decompression."""

from __future__ import annotations

import zipfile
import zlib
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from ruian_addresses.common.errors import ArchiveFormatError, SourceIOError
from ruian_addresses.common.models import ArchiveEntry


class EntryArchive:
    """Exclusive owner of an open ZIP handle. Not safe for concurrent reads."""

    def __init__(self, zip_file: zipfile.ZipFile, owned_stream: BinaryIO | None = None) -> None:
        self._zip = zip_file
        self._owned_stream = owned_stream
        self._members = [info for info in zip_file.infolist() if not info.is_dir()]

    def __len__(self) -> int:
        return len(self._members)

    def entries(self) -> list[ArchiveEntry]:
        return [
            ArchiveEntry(index=index, name=info.filename, size=info.file_size)
            for index, info in enumerate(self._members)
        ]

    def read(self, entry: ArchiveEntry) -> bytes:
        info = self._members[entry.index]
        try:
            return self._zip.read(info)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, EOFError) as exc:
            raise ArchiveFormatError(
                f"cannot decompress: {exc}",
                entry_index=entry.index,
                entry_name=entry.name,
            ) from exc
        except OSError as exc:
            raise SourceIOError(f"failed reading entry {entry.name}: {exc}") from exc

    def close(self) -> None:
        self._zip.close()
        if self._owned_stream is not None:
            self._owned_stream.close()

    def __enter__(self) -> "EntryArchive":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _check_stream(stream: BinaryIO) -> None:
    for capability in ("readable", "seekable"):
        check = getattr(stream, capability, None)
        try:
            ok = check() if check is not None else False
        except (OSError, ValueError) as exc:
            raise SourceIOError(f"archive source is not usable: {exc}") from exc
        if not ok:
            raise SourceIOError(f"archive source must be {capability}")


def open_archive(source: str | Path | BinaryIO) -> EntryArchive:
    owned_stream = None
    if isinstance(source, (str, Path)):
        try:
            owned_stream = open(source, "rb")
        except OSError as exc:
            raise SourceIOError(f"cannot open archive {source}: {exc}") from exc
        stream = owned_stream
    else:
        stream = source
    try:
        _check_stream(stream)
        zip_file = zipfile.ZipFile(stream, "r")
    except zipfile.BadZipFile as exc:
        if owned_stream is not None:
            owned_stream.close()
        raise ArchiveFormatError(f"source is not a ZIP archive: {exc}") from exc
    except OSError as exc:
        if owned_stream is not None:
            owned_stream.close()
        raise SourceIOError(f"failed reading archive source: {exc}") from exc
    except SourceIOError:
        if owned_stream is not None:
            owned_stream.close()
        raise
    return EntryArchive(zip_file, owned_stream)
