import os
import time
from typing import Callable, Optional

import psutil

from bmsearch.config.config import Config
from bmsearch.search.algorithms.boyermoore import BoyerMooreSkipSearch
from bmsearch.search.skiptable import load_skip_table


def _log_process_memory(config: Config) -> None:
    process = psutil.Process(os.getpid())
    rss = process.memory_info().rss
    config.logger.debug("  - Process memory: %.1f MB resident", rss / (1024 ** 2))


def run_search(table_file: str, text_file: str, config: Optional[Config] = None,
               sink: Callable[[str], None] = print) -> int:
    """
    Search a text file for the pattern of a skip-table definition.

    The definition is loaded and the pattern preprocessed once; the text file
    is then streamed line by line and every matching line is written to
    ``sink`` as soon as it is found, prefixed with ``config.match_prefix``.

    Args:
        table_file (str): Path to the skip-table definition.
        text_file (str): Path to the text to search.
        config (Optional[Config]): Settings; built-in defaults if None.
        sink (Callable[[str], None]): Receives each formatted match.

    Returns:
        int: Number of matching lines.

    Raises:
        FileNotFoundError: If either file is missing.
        MalformedInputError: If the definition cannot be parsed.
    """
    if config is None:
        config = Config()
    logger = config.logger

    definition = load_skip_table(table_file, encoding=config.encoding)
    searcher = BoyerMooreSkipSearch(definition)
    logger.info(
        "Searching %s for %r (%d skip table entries)",
        text_file,
        searcher.pattern,
        len(searcher.skip_table),
    )
    logger.debug("  - Shift table: %s", list(searcher.tables.shift))

    start_time = time.time()
    match_count = 0
    for line in searcher.search(searcher.read_lines(text_file, encoding=config.encoding)):
        match_count += 1
        sink(f"{config.match_prefix}{line}")
    elapsed = time.time() - start_time

    stats = searcher.get_stats()
    logger.info(
        "Finished: %d matching lines out of %d (%.2fms)",
        match_count,
        stats["lines_processed"],
        elapsed * 1000,
    )
    if config.report_stats:
        logger.warning(
            "Search statistics: lines=%d matches=%d alignments=%d comparisons=%d skips=%d",
            stats["lines_processed"],
            stats["matches"],
            stats["alignments"],
            stats["comparisons"],
            stats["skips"],
        )
    if config.debug:
        _log_process_memory(config)

    return match_count
