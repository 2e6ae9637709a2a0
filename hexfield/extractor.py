"""
Slices named bit-fields out of a BitSequence.

Extraction is best effort: a row that is incomplete, non-numeric,
non-positive or past the end of the data is left out of the results and the
remaining rows are still processed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .codec import BitSequence, bits_to_int
from .fields import FieldRow, to_definition

logger = logging.getLogger(__name__)

MAX_VALUE_BITS = 64
NOT_REPRESENTABLE = "-"


class OmitReason(Enum):
    MISSING = "missing"
    UNPARSEABLE = "unparseable"
    NON_POSITIVE = "non_positive"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class ExtractionResult:
    name: str
    bits: str
    value: Optional[int]  # None when wider than MAX_VALUE_BITS

    @property
    def representable(self) -> bool:
        return self.value is not None

    @property
    def display_value(self) -> str:
        return NOT_REPRESENTABLE if self.value is None else str(self.value)


@dataclass(frozen=True)
class Omitted:
    name: Optional[str]
    index: int  # position of the row in the input list
    reason: OmitReason


def _value_of(bits: str) -> Optional[int]:
    if len(bits) > MAX_VALUE_BITS:
        return None
    return bits_to_int(bits)


def _extract_row(bits: BitSequence, row, index: int) -> Union[ExtractionResult, Omitted]:
    name, start_cell, length_cell = _cells(row)
    if name is None or start_cell is None or length_cell is None:
        return Omitted(name, index, OmitReason.MISSING)

    definition = to_definition(FieldRow(name, start_cell, length_cell))
    if definition is None:
        return Omitted(name, index, OmitReason.UNPARSEABLE)
    if not definition.is_valid():
        return Omitted(name, index, OmitReason.NON_POSITIVE)
    if definition.end > len(bits):
        return Omitted(name, index, OmitReason.OUT_OF_RANGE)

    chunk = bits.slice(definition.start_index, definition.length)
    return ExtractionResult(name, chunk, _value_of(chunk))


def _cells(row):
    """Accept FieldRow, FieldDefinition or a plain (name, start, length) triple."""
    if isinstance(row, (tuple, list)):
        if len(row) != 3:
            return None, None, None
        return row[0], row[1], row[2]
    return (
        getattr(row, "name", None),
        getattr(row, "start", None),
        getattr(row, "length", None),
    )


class FieldExtractor:
    """Walks field rows in order against one bit sequence."""

    def explain(self, bits: BitSequence, rows) -> List[Union[ExtractionResult, Omitted]]:
        """
        Same walk as extract() but keeps an Omitted entry for every skipped row.

        The returned list has exactly one entry per input row, in input order.
        """
        outcome = []
        for index, row in enumerate(rows):
            entry = _extract_row(bits, row, index)
            if isinstance(entry, Omitted):
                logger.debug("Skipping field %r (row %d): %s", entry.name, index, entry.reason.value)
            outcome.append(entry)
        return outcome

    def extract(self, bits: BitSequence, rows) -> List[ExtractionResult]:
        return [e for e in self.explain(bits, rows) if isinstance(e, ExtractionResult)]


def extract(bits: BitSequence, rows) -> List[ExtractionResult]:
    return FieldExtractor().extract(bits, rows)

