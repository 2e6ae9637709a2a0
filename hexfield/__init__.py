"""HEX bit-field decoder: core codec/extractor plus template storage."""

from .codec import (
    BitSequence,
    EmptyInput,
    HexInput,
    HexValidationError,
    InvalidHexDigit,
    OddLength,
    normalize,
    to_bits,
)
from .decoder import DecodeResult, decode
from .extractor import ExtractionResult, FieldExtractor, OmitReason, Omitted, extract
from .fields import FieldDefinition, FieldRow
from .templates import TemplateNotFound, TemplateStore, TemplateStoreError

__version__ = "0.1.0"
