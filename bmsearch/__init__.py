"""Boyer-Moore line search driven by precomputed skip tables."""

__version__ = "0.1.0"
