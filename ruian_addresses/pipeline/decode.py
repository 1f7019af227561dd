"""Windows-1250 decoding of raw entry bytes."""

from __future__ import annotations

import io
from typing import BinaryIO

from ruian_addresses.common.constants import DECODE_POLICIES, LEGACY_ENCODING
from ruian_addresses.common.errors import ConfigError


def _check_policy(errors: str) -> str:
    if errors not in DECODE_POLICIES:
        raise ConfigError(f"Unsupported decode policy: {errors!r}")
    return errors


def open_text(source: bytes | BinaryIO, errors: str = "strict") -> io.TextIOWrapper:
    """Wrap entry bytes as a text stream decoded chunk by chunk on read."""
    _check_policy(errors)
    raw = io.BytesIO(source) if isinstance(source, (bytes, bytearray, memoryview)) else source
    return io.TextIOWrapper(raw, encoding=LEGACY_ENCODING, errors=errors, newline="")

