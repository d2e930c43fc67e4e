"""Line-oriented term sources."""

from pathlib import Path
from typing import Iterator, Union


def load_terms(path: Union[str, Path], encoding: str = "utf-8") -> Iterator[str]:
    """
    Read terms from a text file, one per line.

    Blank lines are skipped; the text of every other line is kept as is,
    minus its line ending.

    Args:
        path: File to read
        encoding: File encoding

    Yields:
        Raw term strings
    """
    with open(path, "r", encoding=encoding) as f:
        for line in f:
            term = line.rstrip("\r\n")
            if term.strip():
                yield term
