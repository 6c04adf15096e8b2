import os
import time
import random
import string
import tracemalloc
from typing import Callable, Dict, List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from bmsearch.search.base import SearchAlgorithm
from bmsearch.search.algorithms.boyermoore import BoyerMooreSkipSearch
from bmsearch.search.skiptable import SkipTableDefinition, build_skip_table


class NaiveSearch(SearchAlgorithm):
    """Baseline using Python's built-in substring test."""

    def __init__(self, definition: SkipTableDefinition) -> None:
        super().__init__(definition.pattern)
        self._stats = {"lines_processed": 0, "matches": 0}

    def search_line(self, line: str) -> bool:
        self._stats["lines_processed"] += 1
        found = self.pattern in line
        if found:
            self._stats["matches"] += 1
        return found

    def get_stats(self) -> dict:
        return self._stats.copy()


def _default_skip(definition: SkipTableDefinition) -> BoyerMooreSkipSearch:
    return BoyerMooreSkipSearch(SkipTableDefinition(pattern=definition.pattern))


class Benchmark:
    def __init__(self, output_dir: str = "benchmark_results", seed: int = 42):
        self.output_dir = output_dir
        self.algorithms: Dict[str, Callable[[SkipTableDefinition], SearchAlgorithm]] = {
            "Naive": NaiveSearch,
            "SkipTable": BoyerMooreSkipSearch,
            "DefaultSkip": _default_skip,
        }
        self.results: Dict[str, List[Dict]] = {}
        self._rng = random.Random(seed)
        os.makedirs(output_dir, exist_ok=True)

    def generate_test_file(self, size: int, filename: str, patterns: List[str]) -> str:
        filepath = os.path.join(self.output_dir, filename)
        alphabet = string.ascii_letters + string.digits + ' '
        with open(filepath, 'w') as f:
            for _ in range(size):
                line_length = self._rng.randint(20, 100)
                line = ''.join(self._rng.choices(alphabet, k=line_length))
                if patterns and self._rng.random() < 0.05:
                    position = self._rng.randint(0, line_length)
                    line = line[:position] + self._rng.choice(patterns) + line[position:]
                f.write(line + '\n')
        return filepath

    def measure_memory(self, func, *args):
        tracemalloc.start()
        func(*args)
        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
        return peak / 1024

    @staticmethod
    def _scan(algo: SearchAlgorithm, filepath: str) -> int:
        return sum(1 for _ in algo.search(algo.read_lines(filepath)))

    def run_benchmark(self, file_sizes: List[int], patterns: List[str]) -> None:
        self.results.clear()
        definitions = [build_skip_table(pattern) for pattern in patterns]
        total_steps = len(file_sizes) * len(self.algorithms)
        current_step = 0

        for size in file_sizes:
            filename = f"bench_{size}.txt"
            filepath = self.generate_test_file(size, filename, [d.pattern for d in definitions])
            for algo_name, factory in self.algorithms.items():
                current_step += 1
                print(f"Running benchmark: {current_step}/{total_steps} - Algorithm: {algo_name}, File Size: {size} lines", end='\r')

                if algo_name not in self.results:
                    self.results[algo_name] = []
                total_search_time = 0.0
                total_memory_usage = 0.0
                total_matches = 0
                total_comparisons = 0
                for definition in definitions:
                    algo = factory(definition)
                    search_start = time.perf_counter()
                    total_matches += self._scan(algo, filepath)
                    total_search_time += time.perf_counter() - search_start
                    total_comparisons += algo.get_stats().get("comparisons", 0)
                    total_memory_usage += self.measure_memory(self._scan, factory(definition), filepath)
                self.results[algo_name].append({
                    "file_size": size,
                    "avg_search_time": 1000 * total_search_time / len(definitions),
                    "memory_usage": total_memory_usage / len(definitions),
                    "lines_per_ms": size * len(definitions) / (1000 * total_search_time),
                    "matches": total_matches,
                    "comparisons": total_comparisons,
                })

        print("\nBenchmark completed.")

    def plot_figure(self, data, x, y, xlabel, ylabel, filename, log_scale_y=False):
        plt.figure(figsize=(15, 10))
        df = pd.DataFrame(data)
        for algo in df["algorithm"].unique():
            algo_data = df[df["algorithm"] == algo]
            plt.plot(algo_data[x], algo_data[y], marker='o', label=algo)
        if log_scale_y:
            plt.yscale('log')
        plt.xlabel(xlabel)
        plt.ylabel(ylabel + " [Log Scale]" if log_scale_y else ylabel)
        plt.legend()
        plt.tight_layout()
        plt.savefig(filename)
        plt.close()

    def generate_report(self) -> pd.DataFrame:
        data = []
        for algo_name, results in self.results.items():
            for result in results:
                data.append(dict(result, algorithm=algo_name))
        df = pd.DataFrame(data)
        print(df.head())
        self.plot_figure(
            data=df,
            x="file_size",
            y="avg_search_time",
            xlabel="File Size (lines)",
            ylabel="Average Search Time (ms)",
            filename=os.path.join(self.output_dir, "time-speed.png"),
            log_scale_y=True
        )
        self.plot_figure(
            data=df,
            x="file_size",
            y="memory_usage",
            xlabel="File Size (lines)",
            ylabel="Memory Usage (kB)",
            filename=os.path.join(self.output_dir, "memory_usage.png"),
        )

        df.to_csv(os.path.join(self.output_dir, "benchmark_results.csv"), index=False)

        with open(os.path.join(self.output_dir, "benchmark_report.txt"), 'w') as f:
            f.write("Benchmark Summary\n")
            f.write("==================\n\n")
            f.write(f"{'Algorithm':<20}{'Avg Search Time (ms)':<25}{'Memory Usage (kB)':<20}{'Lines/ms':<15}{'Matches':<10}\n")
            f.write("=" * 90 + "\n")
            for algo in df["algorithm"].unique():
                algo_data = df[df["algorithm"] == algo]
                f.write(
                    f"{algo:<20}{algo_data['avg_search_time'].mean():<25.3f}"
                    f"{algo_data['memory_usage'].mean():<20.1f}"
                    f"{algo_data['lines_per_ms'].mean():<15.1f}"
                    f"{int(algo_data['matches'].sum()):<10}\n"
                )
        return df
