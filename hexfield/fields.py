"""
Field rows as typed in by the user and validated field definitions.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

_INT_RE = re.compile(r"^[+-]?[0-9]+$", re.ASCII)

DEFAULT_FIELD_LENGTH = 8


@dataclass(frozen=True)
class FieldRow:
    """
    One row of the field table before validation.

    start/length are kept as the user typed them (text, or an int when the
    row came from storage). Any member may be None when the cell is empty.
    """
    name: Optional[str]
    start: Union[str, int, None]
    length: Union[str, int, None]

    @classmethod
    def from_definition(cls, definition):
        return cls(definition.name, definition.start, definition.length)


@dataclass(frozen=True)
class FieldDefinition:
    name: str
    start: int  # 1-based bit position
    length: int  # in bits

    @property
    def start_index(self) -> int:
        return self.start - 1

    @property
    def end(self) -> int:
        """Last bit covered, 1-based and inclusive."""
        return self.start + self.length - 1

    def is_valid(self) -> bool:
        return self.start > 0 and self.length > 0


def parse_int(value) -> Optional[int]:
    """
    Parse a start/length cell. Returns None when the value is not an integer.

    Accepts ints and ASCII decimal text with an optional sign and surrounding
    whitespace; underscores, floats and hex prefixes are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _INT_RE.match(text):
        return None
    return int(text)


def to_definition(row: FieldRow) -> Optional[FieldDefinition]:
    """Convert a row to a definition if every cell is present and numeric."""
    if row.name is None:
        return None
    start = parse_int(row.start)
    length = parse_int(row.length)
    if start is None or length is None:
        return None
    return FieldDefinition(row.name, start, length)


def default_field_row(index: int, length: int = DEFAULT_FIELD_LENGTH) -> FieldRow:
    """Row the field editor adds at zero-based `index`: consecutive fields of `length` bits."""
    return FieldRow(f"Field {index + 1}", str(index * length + 1), str(length))
