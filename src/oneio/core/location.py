"""Location classification: scheme and compression suffix extraction."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

SCHEME_SEP = "://"


def get_protocol(path: str) -> Optional[str]:
    """Return the text before the first "://", or None for local paths."""
    parts = path.split(SCHEME_SEP, 1)
    if len(parts) < 2:
        return None
    return parts[0]


def file_type(path: str) -> str:
    """Return the lower-cased token after the last "." in `path`."""
    return path.rsplit(".", 1)[-1].lower()


def file_name(path: str) -> str:
    """Return the last "/"-separated component of `path`."""
    return path.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True, slots=True)
class Location:
    raw: str
    scheme: Optional[str]
    path: str

    @classmethod
    def parse(cls, location: str) -> "Location":
        scheme = get_protocol(location)
        path = location if scheme is None else location.split(SCHEME_SEP, 1)[1]
        return cls(raw=location, scheme=scheme, path=path)

    @property
    def is_local(self) -> bool:
        return self.scheme is None

    @property
    def suffix(self) -> str:
        return file_type(self.raw)

    @property
    def name(self) -> str:
        return file_name(self.raw)
