import pytest

from hexfield.decoder import decode
from hexfield.fields import FieldRow
from hexfield.hexfile import read_hex_file


def test_read_trims_content(tmp_path):
    path = tmp_path / "dump.txt"
    path.write_text("\n  DE AD\nBE EF  \n\n", encoding="utf-8")
    assert read_hex_file(path) == "DE AD\nBE EF"


def test_loaded_text_decodes(tmp_path):
    path = tmp_path / "dump.txt"
    path.write_text("80 01\r\n", encoding="utf-8")
    outcome = decode(read_hex_file(path), [FieldRow("top", "1", "1"), FieldRow("low", "16", "1")])
    assert [r.value for r in outcome.results] == [1, 1]


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        read_hex_file(tmp_path / "absent.txt")
