from bmsearch.search.algorithms.boyermoore import BoyerMooreSkipSearch, matches

__all__ = ["BoyerMooreSkipSearch", "matches"]
