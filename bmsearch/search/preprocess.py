from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class GoodSuffixTables:
    """
    Good-suffix tables derived from a single pattern.

    Attributes:
        suffix (Tuple[int, ...]): ``suffix[i]`` is the length of the longest
            suffix of ``pattern[0..i]`` that is also a suffix of the pattern.
            Holds ``m`` entries.
        shift (Tuple[int, ...]): ``shift[i]`` is the good-suffix shift for a
            mismatch at pattern position ``i``. Holds ``m + 1`` entries.
    """
    suffix: Tuple[int, ...]
    shift: Tuple[int, ...]


def _build_suffixes(pattern: str) -> List[int]:
    m = len(pattern)
    suffix = [0] * m
    suffix[m - 1] = m
    g = m - 1  # left edge of the last matched region
    f = m - 1  # position the region was matched from

    for i in range(m - 2, -1, -1):
        if i > g and suffix[i + m - 1 - f] < i - g:
            # Inside the known region and the mirrored value stops short of its edge
            suffix[i] = suffix[i + m - 1 - f]
        else:
            if i < g:
                g = i
            f = i
            while g >= 0 and pattern[g] == pattern[g + m - 1 - f]:
                g -= 1
            suffix[i] = f - g

    return suffix


def _build_shifts(pattern: str, suffix: List[int]) -> List[int]:
    m = len(pattern)
    shift = [m] * (m + 1)

    # Matched suffix has a prefix of the pattern as its own suffix
    j = 0
    for i in range(m - 1, -2, -1):
        if i == -1 or suffix[i] == i + 1:
            while j < m - 1 - i:
                if shift[j] == m:
                    shift[j] = m - 1 - i
                j += 1

    # Matched suffix reoccurs elsewhere in the pattern
    for i in range(m - 1):
        shift[m - 1 - suffix[i]] = m - 1 - i

    return shift


def preprocess_good_suffix(pattern: str) -> GoodSuffixTables:
    """
    Compute the Boyer-Moore good-suffix tables for a pattern.

    Args:
        pattern (str): Non-empty pattern.

    Returns:
        GoodSuffixTables: The suffix-length table and the shift table.

    Raises:
        ValueError: If the pattern is empty.
    """
    if not pattern:
        raise ValueError("Cannot preprocess an empty pattern")
    suffix = _build_suffixes(pattern)
    shift = _build_shifts(pattern, suffix)
    return GoodSuffixTables(suffix=tuple(suffix), shift=tuple(shift))
