"""Domain errors and failure typing."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class SourceIOError(PipelineError):
    """Raised when the archive source cannot be opened, read or seeked."""

    error_code = "SOURCE_IO_ERROR"


class EntryError(PipelineError):
    """Failure tied to one archive entry, optionally to one of its rows."""

    error_code = "ENTRY_ERROR"

    def __init__(
        self,
        detail: str,
        *,
        entry_index: int | None = None,
        entry_name: str | None = None,
        row_number: int | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.entry_index = entry_index
        self.entry_name = entry_name
        self.row_number = row_number

    def __str__(self) -> str:
        location = []
        if self.entry_index is not None:
            location.append(f"entry {self.entry_index}")
        if self.entry_name:
            location.append(f"({self.entry_name})")
        if self.row_number is not None:
            location.append(f"line {self.row_number}")
        if not location:
            return self.detail
        return f"{' '.join(location)}: {self.detail}"


class ArchiveFormatError(EntryError):
    """Raised when the source is not a ZIP archive or an entry cannot be decompressed."""

    error_code = "ARCHIVE_FORMAT_ERROR"


class DecodeError(EntryError):
    """Raised when entry bytes are not valid Windows-1250 under the strict policy."""

    error_code = "DECODE_ERROR"


class RowParseError(EntryError):
    """Raised for structural CSV errors and cells that fail type coercion."""

    error_code = "ROW_PARSE_ERROR"
