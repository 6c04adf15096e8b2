import os
import logging
import tempfile
from unittest.mock import patch

import pytest

from bmsearch.config.config import Config
from bmsearch.driver import run_search
from bmsearch.search.skiptable import MalformedInputError


@pytest.fixture
def temp_dir():
    temp_dir = tempfile.TemporaryDirectory()
    yield temp_dir
    temp_dir.cleanup()


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("bmsearch")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def write_file(directory, name, content):
    path = os.path.join(directory, name)
    with open(path, 'w') as f:
        f.write(content)
    return path


@pytest.fixture
def table_file(temp_dir):
    return write_file(temp_dir.name, "table.txt", "AB-CD\nA,1,1,2,3\nB,1,2,1,2\nC,1,2,3,1\n")


@pytest.fixture
def text_file(temp_dir):
    return write_file(
        temp_dir.name,
        "text.txt",
        "nothing here\nxxxxABCDxxxx\nabcd\nABC D\nABCD at start\n",
    )


def test_reports_matching_lines(table_file, text_file):
    output = []
    count = run_search(table_file, text_file, Config(), sink=output.append)

    assert count == 2
    assert output == [
        "Pattern Match Found: xxxxABCDxxxx",
        "Pattern Match Found: ABCD at start",
    ]


def test_default_sink_prints(table_file, text_file, capsys):
    run_search(table_file, text_file)
    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "Pattern Match Found: xxxxABCDxxxx",
        "Pattern Match Found: ABCD at start",
    ]


def test_custom_prefix(temp_dir, table_file, text_file):
    config_file = write_file(temp_dir.name, "bm.conf", '[SEARCH]\nMATCH_PREFIX = "> "\n')
    output = []
    run_search(table_file, text_file, Config(config_file), sink=output.append)
    assert output[0] == "> xxxxABCDxxxx"


def test_empty_text_source(temp_dir, table_file):
    empty = write_file(temp_dir.name, "empty.txt", "")
    output = []
    assert run_search(table_file, empty, Config(), sink=output.append) == 0
    assert output == []


def test_line_is_emitted_verbatim(temp_dir, table_file):
    text = write_file(temp_dir.name, "spaces.txt", "  ABCD\t trailing  \n")
    output = []
    run_search(table_file, text, Config(), sink=output.append)
    assert output == ["Pattern Match Found:   ABCD\t trailing  "]


def test_missing_table_file(temp_dir, text_file):
    with pytest.raises(FileNotFoundError):
        run_search(os.path.join(temp_dir.name, "nope.txt"), text_file, Config())


def test_missing_text_file(temp_dir, table_file):
    with pytest.raises(FileNotFoundError):
        run_search(table_file, os.path.join(temp_dir.name, "nope.txt"), Config())


def test_malformed_table_stops_before_reading_text(temp_dir, text_file):
    bad_table = write_file(temp_dir.name, "bad.txt", "ABCD\nA,x\n")
    output = []
    with pytest.raises(MalformedInputError):
        run_search(bad_table, text_file, Config(), sink=output.append)
    assert output == []


def test_matches_already_emitted_survive_failure(table_file, text_file):
    output = []

    def failing_sink(line):
        output.append(line)
        if len(output) == 2:
            raise OSError("disk full")

    with pytest.raises(OSError):
        run_search(table_file, text_file, Config(), sink=failing_sink)
    assert len(output) == 2


def test_report_stats_logged(temp_dir, table_file, text_file, caplog):
    config_file = write_file(temp_dir.name, "bm.conf", "[SEARCH]\nREPORT_STATS = yes\n")
    config = Config(config_file)
    with caplog.at_level(logging.WARNING, logger="bmsearch"):
        run_search(table_file, text_file, config, sink=lambda line: None)
    assert "Search statistics: lines=5 matches=2" in caplog.text


def test_debug_logs_memory(temp_dir, table_file, text_file, caplog):
    config = Config(log_level="DEBUG")
    with patch("bmsearch.driver.psutil.Process") as process:
        process.return_value.memory_info.return_value.rss = 10 * 1024 ** 2
        with caplog.at_level(logging.DEBUG, logger="bmsearch"):
            run_search(table_file, text_file, config, sink=lambda line: None)
    assert "Process memory: 10.0 MB" in caplog.text
    assert "Shift table" in caplog.text
