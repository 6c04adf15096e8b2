from abc import ABC, abstractmethod
from typing import Iterable, Iterator, Optional


class SearchError(Exception):
    """Base exception for search-related errors."""
    pass


class SearchAlgorithm(ABC):
    """
    SearchAlgorithm Abstract Base Class

    This abstract base class defines the interface for line-oriented search
    implementations. A concrete algorithm is prepared once for a pattern and
    then asked, line by line, whether the pattern occurs in that line.

    The class establishes the core required methods every implementation must
    provide: single-line matching and statistics reporting. Streaming over a
    sequence of lines and reading lines from a file are shared here.

    Args:
        pattern (str): The pattern the algorithm was prepared for

    Attributes:
        pattern (str): The pattern being searched for

    Abstract Methods:
        search_line(line):
            Decides whether the pattern occurs in a single line.
            Args:
                line (str): One line of text, without its line terminator
            Returns:
                bool: True if the pattern occurs in the line

        get_stats():
            Returns statistics accumulated since the last reset.
            Returns:
                dict: Dictionary containing algorithm-specific statistics

    Methods:
        search(lines):
            Yields every line in which the pattern occurs.

        read_lines(file_path, encoding):
            Yields the lines of a text file with terminators removed.
    """
    def __init__(self, pattern: str):
        if not pattern:
            raise ValueError("Pattern must not be empty")
        self.pattern = pattern

    @abstractmethod
    def search_line(self, line: str) -> bool:
        pass

    @abstractmethod
    def get_stats(self) -> dict:
        pass

    def search(self, lines: Iterable[str]) -> Iterator[str]:
        """
        Yield the lines that contain the pattern.

        Lines are consumed lazily, one at a time; nothing is retained between
        lines.
        """
        for line in lines:
            if self.search_line(line):
                yield line

    @staticmethod
    def read_lines(file_path: str, encoding: Optional[str] = None) -> Iterator[str]:
        """
        Read a text file line by line.

        The file is held open only while the generator is being consumed and
        is closed on every exit path, including when the consumer stops early
        or an exception propagates.

        Args:
            file_path (str): Path to the text file.
            encoding (Optional[str]): Text encoding; platform default if None.

        Yields:
            str: Each line with its trailing line terminator removed.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        try:
            with open(file_path, "r", encoding=encoding, newline=None) as file:
                for line in file:
                    yield line.rstrip("\n")
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {file_path}")
