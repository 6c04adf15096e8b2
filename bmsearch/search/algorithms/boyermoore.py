import time
from typing import Dict, Optional, Sequence

from bmsearch.search.base import SearchAlgorithm
from bmsearch.search.preprocess import GoodSuffixTables, preprocess_good_suffix
from bmsearch.search.skiptable import SkipTable, SkipTableDefinition


def matches(line: str, pattern: str, skip_table: SkipTable, shift: Sequence[int],
            stats: Optional[Dict[str, int]] = None) -> bool:
    """
    Report whether ``pattern`` occurs anywhere in ``line``.

    Characters are compared right to left at each alignment. On a mismatch at
    pattern position ``j`` the alignment advances by the skip table's entry
    for the mismatched text character at ``j``, or by the full pattern length
    when the table has nothing for it.

    The good-suffix ``shift`` table is accepted but not consulted when
    resolving a mismatch; only the loaded skip table decides the distance.

    Args:
        line (str): Text to scan.
        pattern (str): Non-empty pattern.
        skip_table (SkipTable): Per-character, per-position skip distances.
        shift (Sequence[int]): Good-suffix shift table for ``pattern``.
        stats (Optional[Dict[str, int]]): If given, ``comparisons``,
            ``alignments`` and ``skips`` counters are incremented in place.

    Returns:
        bool: True on the first full match, False once no alignment is left.
    """
    m = len(pattern)
    n = len(line)
    if stats is None:
        stats = {}
    comparisons = alignments = skips = 0

    i = 0
    found = False
    while i <= n - m:
        alignments += 1
        j = m - 1
        while j >= 0 and pattern[j] == line[i + j]:
            comparisons += 1
            j -= 1

        if j < 0:
            found = True
            break

        comparisons += 1
        skip = skip_table.skip_for(line[i + j], j, default=m)
        # Table entries are untrusted; the alignment must keep moving right
        if skip < 1:
            skip = 1
        skips += 1
        i += skip

    stats["comparisons"] = stats.get("comparisons", 0) + comparisons
    stats["alignments"] = stats.get("alignments", 0) + alignments
    stats["skips"] = stats.get("skips", 0) + skips
    return found


class BoyerMooreSkipSearch(SearchAlgorithm):
    """
    Boyer-Moore line search driven by a precomputed skip table.

    This class implements the Boyer-Moore right-to-left scan for presence of a
    pattern within single lines of text. It extends the `SearchAlgorithm` base
    class; the pattern and skip table come from a loaded definition and the
    good-suffix tables are computed once at construction.

    Attributes:
        pattern (str): The sanitized pattern.
        skip_table (SkipTable): Skip distances consulted on mismatch.
        tables (GoodSuffixTables): Suffix and shift tables for the pattern.
        _stats (dict): Statistics about the search process, including the
            number of comparisons, alignments tried, skips taken, lines
            processed, matches and search time.

    Methods:
        search_line(line: str) -> bool: Checks a single line for the pattern.
        search(lines) -> Iterator[str]: Yields the lines that contain the pattern.
        get_stats() -> dict: Returns statistics since the last reset.
        reset_stats() -> None: Zeroes the statistics.
    """
    def __init__(self, definition: SkipTableDefinition) -> None:
        super().__init__(definition.pattern)
        self.skip_table = definition.skip_table
        self.tables: GoodSuffixTables = preprocess_good_suffix(self.pattern)
        self._stats: Dict[str, float] = {}
        self.reset_stats()

    def reset_stats(self) -> None:
        self._stats = {
            "comparisons": 0,
            "alignments": 0,
            "skips": 0,
            "lines_processed": 0,
            "matches": 0,
            "search_time": 0.0,
        }

    def search_line(self, line: str) -> bool:
        start_time = time.perf_counter()
        found = matches(line, self.pattern, self.skip_table, self.tables.shift, self._stats)
        self._stats["lines_processed"] += 1
        if found:
            self._stats["matches"] += 1
        self._stats["search_time"] += time.perf_counter() - start_time
        return found

    def get_stats(self) -> dict:
        return self._stats.copy()
