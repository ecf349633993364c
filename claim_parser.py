"""
Parse fabric claim lines into structured rectangles.

Format (one claim per line):
    #<id> @ <left>,<top>: <width>x<height>

Only the five integers and their order matter; every run of characters
other than ASCII 0-9 is treated as a delimiter.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

_NON_DIGITS = re.compile(r"[^0-9]+")

CLAIM_FIELDS = 5

ON_ERROR_CHOICES = ("abort", "skip")


class ParseError(ValueError):
    """A line that does not hold exactly five integers."""

    def __init__(self, line: str, line_number: Optional[int] = None):
        self.line = line
        self.line_number = line_number
        msg = f"malformed claim line: {line!r}"
        if line_number is not None:
            msg = f"line {line_number}: {msg}"
        super().__init__(msg)


@dataclass(frozen=True)
class Claim:
    """One rectangle on the fabric grid, top-left corner plus dimensions."""
    id: int
    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def area(self) -> int:
        return self.width * self.height

    def cells(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.top, self.bottom):
            for x in range(self.left, self.right):
                yield (x, y)

    def __str__(self) -> str:
        return (
            f"Claim #{self.id} - left: {self.left}, top: {self.top}, "
            f"dim: {self.width}x{self.height}"
        )


def parse_claim(line: str) -> Claim:
    """Parse a single claim line, raising ParseError unless it has five integers."""
    values = [int(tok) for tok in _NON_DIGITS.split(line) if tok]
    if len(values) != CLAIM_FIELDS:
        raise ParseError(line)
    claim_id, left, top, width, height = values
    return Claim(id=claim_id, left=left, top=top, width=width, height=height)


def iter_claims(lines: Iterable[str], on_error: str = "abort",
                errors: Optional[List[ParseError]] = None) -> Iterator[Claim]:
    """Yield claims from lines, skipping blanks. Errors carry 1-based line numbers.

    With on_error="abort" the first malformed line raises ParseError. With
    on_error="skip" it is dropped and its ParseError appended to `errors`.
    """
    if on_error not in ON_ERROR_CHOICES:
        raise ValueError(
            f"on_error must be one of {ON_ERROR_CHOICES}, got '{on_error}'"
        )
    for lineno, line in enumerate(lines, start=1):
        line = line.rstrip()
        if not line:
            continue
        try:
            claim = parse_claim(line)
        except ParseError as exc:
            err = ParseError(exc.line, lineno)
            if on_error == "abort":
                raise err from None
            if errors is not None:
                errors.append(err)
            continue
        yield claim


def parse_claims(filepath: str, on_error: str = "abort",
                 errors: Optional[List[ParseError]] = None) -> List[Claim]:
    """Parse a claims file into a list of Claim."""
    with open(filepath) as f:
        return list(iter_claims(f, on_error=on_error, errors=errors))
