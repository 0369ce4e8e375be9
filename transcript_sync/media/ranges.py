"""HTTP byte-range parsing for single-range ``Range`` headers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from transcript_sync.errors import RangeNotSatisfiableError

_RANGE_RE = re.compile(r"^\s*bytes\s*=\s*(\d*)\s*-\s*(\d*)\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int  # inclusive

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, total: int) -> str:
        return f"bytes {self.start}-{self.end}/{total}"


def parse_range_header(header: str | None, size: int) -> ByteRange | None:
    """Parse ``bytes=start-end`` against a resource of *size* bytes.

    - ``end`` omitted -> ``size - 1``; ``end`` past the file is clamped.
    - ``bytes=-N`` -> the last N bytes.
    - Missing or unparsable headers (including multi-range requests and
      ``end < start``) return ``None`` so the caller serves the full file.

    Raises:
        RangeNotSatisfiableError: The range starts at or beyond the end of
            the file, or asks for an empty suffix.
    """
    if not header:
        return None
    match = _RANGE_RE.match(header)
    if match is None:
        return None

    start_text, end_text = match.groups()
    if not start_text and not end_text:
        return None

    if not start_text:
        suffix = int(end_text)
        if suffix == 0 or size == 0:
            raise RangeNotSatisfiableError(header, size)
        return ByteRange(start=max(0, size - suffix), end=size - 1)

    start = int(start_text)
    end = int(end_text) if end_text else size - 1
    if start >= size:
        raise RangeNotSatisfiableError(header, size)
    if end < start:
        return None
    return ByteRange(start=start, end=min(end, size - 1))
