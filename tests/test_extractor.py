import pytest

from hexfield.extractor import (
    NOT_REPRESENTABLE,
    ExtractionResult,
    FieldExtractor,
    OmitReason,
    Omitted,
    extract,
)
from hexfield.fields import FieldDefinition, FieldRow


def test_full_byte(bits_of):
    results = extract(bits_of("FF"), [FieldRow("A", "1", "8")])
    assert results == [ExtractionResult("A", "11111111", 255)]


def test_nibble_in_second_byte(bits_of):
    results = extract(bits_of("FF0A"), [FieldRow("B", "9", "4")])
    assert results == [ExtractionResult("B", "0000", 0)]


def test_field_crossing_byte_boundary(bits_of):
    # 0x0FF0 -> 0000 1111 1111 0000, bits 5..12 are all ones
    results = extract(bits_of("0FF0"), [FieldRow("mid", "5", "8")])
    assert results[0].bits == "11111111"
    assert results[0].value == 255


def test_out_of_range_is_omitted(bits_of):
    assert extract(bits_of("FF"), [FieldRow("too long", "1", "16")]) == []


def test_field_ending_on_last_bit_is_kept(bits_of):
    results = extract(bits_of("FF01"), [FieldRow("last", "16", "1")])
    assert results == [ExtractionResult("last", "1", 1)]


def test_zero_start_or_length_omitted_others_kept(bits_of):
    rows = [
        FieldRow("zero length", "1", "0"),
        FieldRow("ok", "1", "4"),
        FieldRow("zero start", "0", "4"),
        FieldRow("negative", "-3", "4"),
    ]
    results = extract(bits_of("A0"), rows)
    assert [r.name for r in results] == ["ok"]
    assert results[0].bits == "1010"


@pytest.mark.parametrize("start,length", [("x", "8"), ("1", ""), ("1.5", "8"), ("0x1", "8"), ("1_0", "2"), ("\u0661", "\u0668")])
def test_unparseable_cells_omitted(bits_of, start, length):
    assert extract(bits_of("FFFF"), [FieldRow("bad", start, length)]) == []


def test_missing_cells_omitted(bits_of):
    rows = [FieldRow(None, "1", "8"), FieldRow("n", None, "8"), FieldRow("n", "1", None)]
    assert extract(bits_of("FF"), rows) == []


def test_cells_tolerate_whitespace_and_sign(bits_of):
    results = extract(bits_of("80"), [FieldRow("s", " +1 ", "1 ")])
    assert results == [ExtractionResult("s", "1", 1)]


def test_accepts_definitions_and_triples(bits_of):
    bits = bits_of("F00F")
    results = extract(bits, [FieldDefinition("d", 1, 4), ("t", "13", "4"), ("short", "1")])
    assert [(r.name, r.bits) for r in results] == [("d", "1111"), ("t", "1111")]


def test_order_is_preserved(bits_of):
    rows = [FieldRow(f"f{i}", str(i * 8 + 1), "8") for i in range(4)][::-1]
    results = extract(bits_of("00112233"), rows)
    assert [r.name for r in results] == ["f3", "f2", "f1", "f0"]
    assert [r.value for r in results] == [0x33, 0x22, 0x11, 0x00]


def test_64_bit_value(bits_of):
    results = extract(bits_of("FF" * 8), [FieldRow("u64", "1", "64")])
    assert results[0].value == 2 ** 64 - 1
    assert results[0].display_value == str(2 ** 64 - 1)


def test_wider_than_64_bits_not_representable(bits_of):
    results = extract(bits_of("FF" * 9), [FieldRow("wide", "1", "72")])
    assert len(results) == 1
    assert results[0].bits == "1" * 72
    assert results[0].value is None
    assert not results[0].representable
    assert results[0].display_value == NOT_REPRESENTABLE


def test_wide_field_with_leading_zeros_still_not_representable(bits_of):
    results = extract(bits_of("00" * 9), [FieldRow("wide", "1", "65")])
    assert results[0].value is None
    assert results[0].bits == "0" * 65


def test_explain_reports_every_row(bits_of):
    rows = [
        FieldRow("ok", "1", "8"),
        FieldRow(None, "1", "8"),
        FieldRow("text", "abc", "8"),
        FieldRow("zero", "1", "0"),
        FieldRow("past end", "2", "8"),
    ]
    outcome = FieldExtractor().explain(bits_of("FF"), rows)
    assert len(outcome) == len(rows)
    assert isinstance(outcome[0], ExtractionResult)
    assert outcome[1:] == [
        Omitted(None, 1, OmitReason.MISSING),
        Omitted("text", 2, OmitReason.UNPARSEABLE),
        Omitted("zero", 3, OmitReason.NON_POSITIVE),
        Omitted("past end", 4, OmitReason.OUT_OF_RANGE),
    ]


def test_extraction_is_repeatable(bits_of):
    bits = bits_of("C3A5")
    rows = [FieldRow("a", "3", "7"), FieldRow("b", "10", "5")]
    assert extract(bits, rows) == extract(bits, rows)
