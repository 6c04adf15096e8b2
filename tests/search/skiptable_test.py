import os
import tempfile
import logging
import unittest

import pytest

from bmsearch.search.base import SearchError
from bmsearch.search.skiptable import (
    MalformedInputError,
    SkipTable,
    SkipTableDefinition,
    build_skip_table,
    format_skip_table,
    load_skip_table,
    parse_skip_table,
    sanitize_pattern,
    write_skip_table,
)


@pytest.fixture
def temp_dir():
    """Fixture that creates a temporary directory for testing"""
    temp_dir = tempfile.TemporaryDirectory()
    yield temp_dir
    temp_dir.cleanup()


def write_file(directory, name, content):
    path = os.path.join(directory, name)
    with open(path, 'w') as f:
        f.write(content)
    return path


class TestSkipTable(unittest.TestCase):
    """Lookup behavior of the skip table value object"""

    def setUp(self):
        self.table = SkipTable({'D': [1, 2, 3, 3], 'X': [5]})

    def test_skip_for_present_entry(self):
        self.assertEqual(self.table.skip_for('D', 3, default=4), 3)
        self.assertEqual(self.table.skip_for('D', 0, default=4), 1)

    def test_skip_for_missing_character(self):
        self.assertEqual(self.table.skip_for('Q', 0, default=4), 4)

    def test_skip_for_position_out_of_range(self):
        # A one-entry sequence only covers mismatch position 0
        self.assertEqual(self.table.skip_for('X', 0, default=4), 5)
        self.assertEqual(self.table.skip_for('X', 3, default=4), 4)
        self.assertEqual(self.table.skip_for('X', -1, default=4), 4)

    def test_single_entry_at_position_three_falls_back(self):
        table = SkipTable({'D': [3]})
        self.assertEqual(table.skip_for('D', 0, default=4), 3)
        self.assertEqual(table.skip_for('D', 3, default=4), 4)

    def test_lookup_returns_optional_sequence(self):
        self.assertEqual(self.table.lookup('D'), (1, 2, 3, 3))
        self.assertIsNone(self.table.lookup('Q'))

    def test_read_only(self):
        with self.assertRaises(TypeError):
            self.table._table['Q'] = (1,)
        copy = self.table.as_dict()
        copy['Q'] = (1,)
        self.assertNotIn('Q', self.table)

    def test_rejects_multi_character_keys(self):
        with self.assertRaises(ValueError):
            SkipTable({'AB': [1]})

    def test_mapping_protocol(self):
        self.assertEqual(len(self.table), 2)
        self.assertEqual(sorted(self.table), ['D', 'X'])
        self.assertEqual(self.table, SkipTable({'X': (5,), 'D': (1, 2, 3, 3)}))


def test_sanitize_pattern():
    assert sanitize_pattern("AB-C1") == "ABC1"
    assert sanitize_pattern("  he llo!\n") == "hello"
    assert sanitize_pattern("é-ß") == ""


def test_parse_sanitizes_pattern_line():
    definition = parse_skip_table(["AB-C1\n"])
    assert definition.pattern == "ABC1"
    assert len(definition.skip_table) == 0


def test_parse_records():
    definition = parse_skip_table([
        "ABCD\n",
        "A,1,2,3,4\n",
        "D,4,3,2,1\n",
    ])
    assert definition.pattern == "ABCD"
    assert definition.skip_table.lookup('A') == (1, 2, 3, 4)
    assert definition.skip_table.lookup('D') == (4, 3, 2, 1)


def test_parse_uses_first_character_of_key_field():
    definition = parse_skip_table(["ABCD", "Dog,7"])
    assert definition.skip_table.lookup('D') == (7,)


def test_parse_last_duplicate_wins():
    definition = parse_skip_table(["ABCD", "A,1,1", "A,9"])
    assert definition.skip_table.lookup('A') == (9,)


def test_parse_stops_at_blank_line():
    definition = parse_skip_table(["ABCD", "A,1", "", "B,2"])
    assert 'A' in definition.skip_table
    assert 'B' not in definition.skip_table


def test_parse_handles_crlf_terminators():
    definition = parse_skip_table(["ABCD\r\n", "A,1,2\r\n", "\r\n", "B,2\r\n"])
    assert definition.skip_table.lookup('A') == (1, 2)
    assert 'B' not in definition.skip_table


def test_parse_space_key():
    definition = parse_skip_table(["ABCD", " ,2,2"])
    assert definition.skip_table.lookup(' ') == (2, 2)


def test_parse_ignores_records_without_skips(caplog):
    with caplog.at_level(logging.WARNING, logger="bmsearch"):
        definition = parse_skip_table(["ABCD", "stray", "B,2"])
    assert len(definition.skip_table) == 1
    assert definition.skip_table.lookup('B') == (2,)
    assert "Line 2" in caplog.text


def test_parse_drops_trailing_empty_fields():
    definition = parse_skip_table(["ABCD", "A,1,2,", "C,3,,"])
    assert definition.skip_table.lookup('A') == (1, 2)
    assert definition.skip_table.lookup('C') == (3,)


@pytest.mark.parametrize("stray", ["A,", ",,,", "Q,,"])
def test_parse_ignores_records_with_only_empty_trailing_fields(stray):
    definition = parse_skip_table(["ABCD", stray, "B,2"])
    assert len(definition.skip_table) == 1
    assert definition.skip_table.lookup('B') == (2,)


def test_parse_empty_source():
    with pytest.raises(MalformedInputError, match="empty"):
        parse_skip_table([])


def test_parse_pattern_without_alphanumerics():
    with pytest.raises(MalformedInputError):
        parse_skip_table(["--!!--", "A,1"])


def test_parse_missing_key():
    with pytest.raises(MalformedInputError, match="Line 2"):
        parse_skip_table(["ABCD", ",1,2"])


def test_parse_non_integer_skip():
    with pytest.raises(MalformedInputError, match="Line 3"):
        parse_skip_table(["ABCD", "A,1", "B,two"])


def test_malformed_input_is_search_error():
    assert issubclass(MalformedInputError, SearchError)


def test_load_skip_table(temp_dir):
    path = write_file(temp_dir.name, "table.txt", "AB-C1\nA,1,2,3,4\n1,4,4,4,1\n")
    definition = load_skip_table(path)
    assert definition == SkipTableDefinition(
        pattern="ABC1",
        skip_table=SkipTable({'A': [1, 2, 3, 4], '1': [4, 4, 4, 1]}),
    )


def test_load_empty_file(temp_dir):
    path = write_file(temp_dir.name, "empty.txt", "")
    with pytest.raises(MalformedInputError, match="empty.txt"):
        load_skip_table(path)


def test_load_missing_file(temp_dir):
    with pytest.raises(FileNotFoundError, match="Skip table file not found"):
        load_skip_table(os.path.join(temp_dir.name, "missing.txt"))


def test_build_skip_table_bad_character_rule():
    definition = build_skip_table("ABCA")
    table = definition.skip_table
    assert definition.pattern == "ABCA"
    # A seen at 0 only before position 3
    assert table.lookup('A') == (1, 1, 2, 3)
    assert table.lookup('B') == (1, 2, 1, 2)
    assert table.lookup('C') == (1, 2, 3, 1)
    assert table.lookup('z') == (1, 2, 3, 4)


def test_build_skip_table_entries_in_range():
    definition = build_skip_table("needle42")
    m = len(definition.pattern)
    for char in definition.skip_table:
        skips = definition.skip_table.lookup(char)
        assert len(skips) == m
        assert all(1 <= skip <= m for skip in skips)


def test_build_skip_table_alphabet():
    definition = build_skip_table("ab-c", alphabet="xy,")
    assert definition.pattern == "abc"
    assert sorted(definition.skip_table) == ['a', 'b', 'c', 'x', 'y']


def test_build_skip_table_rejects_empty_pattern():
    with pytest.raises(ValueError):
        build_skip_table("***")


def test_format_then_parse(temp_dir):
    definition = build_skip_table("GCAGAGAG", alphabet="ACGT ")
    lines = format_skip_table(definition)
    assert lines[0] == "GCAGAGAG"
    assert lines[1].startswith(" ,")

    path = os.path.join(temp_dir.name, "generated.txt")
    write_skip_table(definition, path)
    assert load_skip_table(path) == definition
