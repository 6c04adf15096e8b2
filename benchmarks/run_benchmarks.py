import argparse

from benchmarks.benchmark import Benchmark


def main():
    parser = argparse.ArgumentParser(description="Benchmark skip-table Boyer-Moore line search")
    parser.add_argument("--sizes", type=int, nargs="+", default=list(range(10_000, 200_001, 30_000)),
                        help="File sizes to test, in lines")
    parser.add_argument("--patterns", nargs="+", default=["needle", "ABCDEFGH", "x9", "quickbrownfox"],
                        help="Patterns to search for")
    parser.add_argument("--output-dir", default="benchmark_results",
                        help="Directory for benchmark results")
    parser.add_argument("--seed", type=int, default=42,
                        help="RNG seed for the generated text")
    args = parser.parse_args()

    benchmark = Benchmark(args.output_dir, seed=args.seed)

    print("Running benchmarks...")
    print("===================")
    print(f"File sizes: {len(args.sizes)}")
    print(f"Patterns: {', '.join(args.patterns)}")
    print()

    benchmark.run_benchmark(file_sizes=args.sizes, patterns=args.patterns)

    print("\nGenerating reports...")
    benchmark.generate_report()

    print(f"\nBenchmark results saved to {args.output_dir}")
    print("Files generated:")
    print(f"- {args.output_dir}/time-speed.png")
    print(f"- {args.output_dir}/memory_usage.png")
    print(f"- {args.output_dir}/benchmark_results.csv")
    print(f"- {args.output_dir}/benchmark_report.txt")


if __name__ == "__main__":
    main()
