"""Convenience readers on top of the pipeline."""

from __future__ import annotations

import io
import json
from typing import Any, BinaryIO, Iterator

from .pipeline import PathLike, get_reader


def read_to_string(path: PathLike, encoding: str = "utf-8") -> str:
    """Read and decode the whole content of `path` as text."""
    with get_reader(path) as reader:
        return reader.read().decode(encoding)


def strip_line_ending(line: str) -> str:
    """Drop one trailing LF, then one CR; a lone CR inside a line is kept."""
    return line.removesuffix("\n").removesuffix("\r")


def _iter_lines(reader: BinaryIO, encoding: str) -> Iterator[str]:
    # newline="\n": split on "\n" only, no universal-newline translation
    with io.TextIOWrapper(reader, encoding=encoding, newline="\n") as text:
        for line in text:
            yield strip_line_ending(line)


def read_lines(path: PathLike, encoding: str = "utf-8") -> Iterator[str]:
    """Return a lazy iterator over the lines of `path`, without line terminators.

    The location is opened immediately, so open failures surface here rather
    than on first iteration.
    """
    return _iter_lines(get_reader(path), encoding)


def read_json(path: PathLike) -> Any:
    """Parse JSON content from any location."""
    with get_reader(path) as reader:
        return json.load(reader)
