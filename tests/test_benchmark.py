import tempfile

import pytest

pytest.importorskip("pandas")
pytest.importorskip("matplotlib")

from benchmarks.benchmark import Benchmark


@pytest.fixture
def temp_dir():
    temp_dir = tempfile.TemporaryDirectory()
    yield temp_dir
    temp_dir.cleanup()


def test_skip_table_search_agrees_with_naive(temp_dir):
    benchmark = Benchmark(temp_dir.name, seed=3)
    benchmark.run_benchmark(file_sizes=[300], patterns=["needle", "x9"])
    df = benchmark.generate_report()

    totals = df.groupby("algorithm")["matches"].sum()
    assert totals["Naive"] > 0
    assert totals["SkipTable"] == totals["Naive"]
    assert totals["DefaultSkip"] <= totals["Naive"]
