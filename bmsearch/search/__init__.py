from bmsearch.search.base import SearchAlgorithm, SearchError
from bmsearch.search.preprocess import GoodSuffixTables, preprocess_good_suffix
from bmsearch.search.skiptable import (
    MalformedInputError,
    SkipTable,
    SkipTableDefinition,
    build_skip_table,
    load_skip_table,
    parse_skip_table,
)

__all__ = [
    "GoodSuffixTables",
    "MalformedInputError",
    "SearchAlgorithm",
    "SearchError",
    "SkipTable",
    "SkipTableDefinition",
    "build_skip_table",
    "load_skip_table",
    "parse_skip_table",
    "preprocess_good_suffix",
]
