"""
decode(): hex text + field rows -> extraction results.

This is the only entry point the window and the command line use; neither
talks to the codec or the extractor directly.
"""

import logging
from typing import List, NamedTuple, Optional

from .codec import HexValidationError, normalize, to_bits
from .extractor import ExtractionResult, FieldExtractor

logger = logging.getLogger(__name__)


class DecodeResult(NamedTuple):
    results: List[ExtractionResult]
    error: Optional[HexValidationError]

    @property
    def ok(self) -> bool:
        return self.error is None


def decode(raw_hex_text, field_rows, extractor=None) -> DecodeResult:
    """
    Validate `raw_hex_text`, expand it to bits and extract every usable row.

    Hex problems (EmptyInput, OddLength, InvalidHexDigit) are returned in
    `error` with no results. Bad rows are never errors, they are only
    missing from `results`.
    """
    try:
        hex_input = normalize(raw_hex_text)
        bits = to_bits(hex_input)
    except HexValidationError as e:
        logger.info("Decode rejected: %s", e)
        return DecodeResult([], e)

    extractor = extractor or FieldExtractor()
    rows = list(field_rows)
    results = extractor.extract(bits, rows)
    logger.info(
        "Decoded %d bytes: %d of %d fields extracted", hex_input.byte_count, len(results), len(rows)
    )
    return DecodeResult(results, None)
