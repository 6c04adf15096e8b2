import logging
import re
import string
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from bmsearch.search.base import SearchError

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
FIELD_SEPARATOR = ","
DEFAULT_ALPHABET = string.ascii_letters + string.digits + string.punctuation + " "


class MalformedInputError(SearchError):
    """Raised when a skip-table definition cannot be parsed."""
    pass


class SkipTable:
    """
    Read-only mapping from a character to its per-position skip sequence.

    Entry ``j`` of a character's sequence is the distance to advance the
    alignment when that character in the text mismatches pattern position
    ``j``. Characters may be absent and sequences may be shorter than the
    pattern; :meth:`skip_for` falls back to a caller-supplied default then.
    """

    def __init__(self, entries: Optional[Mapping[str, Sequence[int]]] = None) -> None:
        table: Dict[str, Tuple[int, ...]] = {}
        for char, skips in (entries or {}).items():
            if len(char) != 1:
                raise ValueError(f"Skip table keys must be single characters, got {char!r}")
            table[char] = tuple(int(skip) for skip in skips)
        self._table = MappingProxyType(table)

    def lookup(self, char: str) -> Optional[Tuple[int, ...]]:
        """Return the skip sequence for ``char``, or None if it has none."""
        return self._table.get(char)

    def skip_for(self, char: str, position: int, default: int) -> int:
        """
        Skip distance for ``char`` mismatching at pattern ``position``.

        Returns ``default`` when the character has no entry or its sequence
        does not reach ``position``.
        """
        skips = self._table.get(char)
        if skips is None or not 0 <= position < len(skips):
            return default
        return skips[position]

    def as_dict(self) -> Dict[str, Tuple[int, ...]]:
        return dict(self._table)

    def __contains__(self, char: object) -> bool:
        return char in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SkipTable):
            return NotImplemented
        return self._table == other._table

    def __hash__(self) -> int:
        return hash(frozenset(self._table.items()))

    def __repr__(self) -> str:
        return f"SkipTable({dict(self._table)!r})"


@dataclass(frozen=True)
class SkipTableDefinition:
    """
    Pattern and skip table loaded from a single definition source.

    Attributes:
        pattern (str): Sanitized pattern, alphanumerics only.
        skip_table (SkipTable): Per-character skip sequences.
    """
    pattern: str
    skip_table: SkipTable = field(default_factory=SkipTable)


def sanitize_pattern(raw: str) -> str:
    """Strip every character that is not an ASCII letter or digit."""
    return _NON_ALNUM.sub("", raw)


def _parse_record(line: str, line_number: int) -> Optional[Tuple[str, Tuple[int, ...]]]:
    parts = line.split(FIELD_SEPARATOR)
    # Trailing empty fields do not count: "A,1," is "A,1" and ",,," has no fields
    while parts and not parts[-1]:
        parts.pop()
    if len(parts) < 2:
        logger.warning("Line %d: ignoring record without skip values: %r", line_number, line)
        return None
    if not parts[0]:
        raise MalformedInputError(f"Line {line_number}: missing character key in {line!r}")

    skips = []
    for value in parts[1:]:
        try:
            skips.append(int(value))
        except ValueError as e:
            raise MalformedInputError(
                f"Line {line_number}: invalid skip value {value!r} for key {parts[0][0]!r}"
            ) from e
    return parts[0][0], tuple(skips)


def parse_skip_table(lines: Iterable[str]) -> SkipTableDefinition:
    """
    Parse a skip-table definition from a sequence of lines.

    The first line holds the pattern; it is sanitized down to ASCII letters
    and digits. Each following line is ``<char>,<int>,<int>,...`` until an
    empty line or the end of the source. A repeated key replaces the earlier
    entry. Lines without any skip value are logged and ignored.

    Args:
        lines: Lines of the definition; trailing line terminators are ignored.

    Returns:
        SkipTableDefinition: The sanitized pattern and its skip table.

    Raises:
        MalformedInputError: If the source is empty, the pattern is empty
            after sanitizing, a record has no key, or a skip value is not an
            integer.
    """
    iterator = iter(lines)
    try:
        first_line = next(iterator)
    except StopIteration:
        raise MalformedInputError("Skip table definition is empty: no pattern line")

    pattern = sanitize_pattern(first_line.rstrip("\r\n"))
    if not pattern:
        raise MalformedInputError(
            f"Pattern line {first_line.rstrip()!r} has no letters or digits"
        )

    entries: Dict[str, Tuple[int, ...]] = {}
    for line_number, raw_line in enumerate(iterator, start=2):
        line = raw_line.rstrip("\r\n")
        if not line:
            break
        record = _parse_record(line, line_number)
        if record is not None:
            char, skips = record
            entries[char] = skips

    logger.debug("Parsed pattern %r with %d skip table entries", pattern, len(entries))
    return SkipTableDefinition(pattern=pattern, skip_table=SkipTable(entries))


def load_skip_table(file_path: str, encoding: Optional[str] = None) -> SkipTableDefinition:
    """
    Load a skip-table definition file.

    Args:
        file_path (str): Path to the definition file.
        encoding (Optional[str]): Text encoding; platform default if None.

    Returns:
        SkipTableDefinition: The sanitized pattern and its skip table.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedInputError: If the contents cannot be parsed.
    """
    try:
        with open(file_path, "r", encoding=encoding) as file:
            definition = parse_skip_table(file)
    except FileNotFoundError:
        raise FileNotFoundError(f"Skip table file not found: {file_path}")
    except MalformedInputError as e:
        raise MalformedInputError(f"{file_path}: {e}") from e

    logger.info("Loaded skip table for pattern %r from %s", definition.pattern, file_path)
    return definition


def build_skip_table(pattern: str, alphabet: Optional[str] = None) -> SkipTableDefinition:
    """
    Derive a skip table for ``pattern`` from the bad-character rule.

    For a text character ``c`` mismatching pattern position ``j`` the skip
    aligns the last occurrence of ``c`` in ``pattern[0..j-1]`` under it, or
    moves past it entirely when there is none. Entries are always between 1
    and the pattern length.

    Args:
        pattern (str): Raw pattern; sanitized like a definition's first line.
        alphabet (Optional[str]): Characters to build entries for. Defaults
            to the pattern's characters plus printable ASCII. The separator
            character cannot be a key and is skipped.

    Returns:
        SkipTableDefinition: The sanitized pattern and the derived table.

    Raises:
        ValueError: If the pattern is empty after sanitizing.
    """
    pattern = sanitize_pattern(pattern)
    if not pattern:
        raise ValueError("Pattern has no letters or digits")

    chars = set(pattern) | set(DEFAULT_ALPHABET if alphabet is None else alphabet)
    chars -= {FIELD_SEPARATOR, "\n", "\r"}

    entries: Dict[str, List[int]] = {}
    for char in chars:
        skips = []
        last_seen = -1
        for j, pattern_char in enumerate(pattern):
            skips.append(j - last_seen)
            if pattern_char == char:
                last_seen = j
        entries[char] = skips

    return SkipTableDefinition(pattern=pattern, skip_table=SkipTable(entries))


def format_skip_table(definition: SkipTableDefinition) -> List[str]:
    """Render a definition as lines that :func:`parse_skip_table` reads back."""
    lines = [definition.pattern]
    table = definition.skip_table
    for char in sorted(table):
        skips = table.lookup(char) or ()
        lines.append(FIELD_SEPARATOR.join([char] + [str(skip) for skip in skips]))
    return lines


def write_skip_table(definition: SkipTableDefinition, file_path: str,
                     encoding: Optional[str] = None) -> None:
    """Write a definition to ``file_path`` in the loadable text format."""
    with open(file_path, "w", encoding=encoding) as file:
        for line in format_skip_table(definition):
            file.write(line + "\n")
