"""Tokenising text into words and reading/writing frequency tables as CSV."""

from __future__ import annotations

from typing import IO, Iterator

from .rbtree import RBTree
from .word import Word

PUNCTUATION = frozenset(".?!")
"""Characters that form tokens of their own."""

_FREQUENCY_SCALE = 10_000
_SUM_TOLERANCE = 1e-3


class CsvFormatError(ValueError):
    """Raised when a frequency table in CSV form cannot be read."""

    def __init__(self, line_number: int, message: str) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


def iter_words(stream: IO[str]) -> Iterator[Word]:
    """Yield the tokens of ``stream``: lower-cased words and ``.``, ``?``, ``!``.

    Any other character only separates words.
    """
    letters: list[str] = []
    for chunk in iter(lambda: stream.read(4096), ""):
        for ch in chunk:
            if ch.isalnum():
                letters.append(ch.lower())
                continue
            if letters:
                yield Word("".join(letters))
                letters.clear()
            if ch in PUNCTUATION:
                yield Word(ch)
    if letters:
        yield Word("".join(letters))


def export_csv(out: IO[str], table: RBTree) -> None:
    """Write ``table`` as lines of ``word,successor,freq,successor,freq...``."""
    for key, context in table.items():
        fields = [key]
        total = context.total_entries
        if total:
            for successor, count in context.tree.items():
                fields.append(successor)
                fields.append(f"{count / total:.4f}")
        out.write(",".join(fields) + "\n")


def import_csv(stream: IO[str], table: RBTree) -> int:
    """Load a frequency table from CSV into ``table``; return the rows read.

    Each row's frequencies must add up to 1. Frequencies are stored as
    integer weights so that the table can drive text generation.
    """
    from .analyzer import ensure_successor_context

    rows = 0
    for line_number, line in enumerate(stream, start=1):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        fields = line.split(",")
        word, pairs = fields[0], fields[1:]
        if not word:
            raise CsvFormatError(line_number, "empty word")
        if not pairs or len(pairs) % 2:
            raise CsvFormatError(line_number, "expected successor,frequency pairs")

        parsed: list[tuple[str, float]] = []
        for successor, raw in zip(pairs[::2], pairs[1::2]):
            if not successor:
                raise CsvFormatError(line_number, "empty successor")
            try:
                frequency = float(raw)
            except ValueError:
                raise CsvFormatError(line_number, f"invalid frequency {raw!r}") from None
            if not 0.0 <= frequency <= 1.0:
                raise CsvFormatError(line_number, f"frequency out of range: {raw}")
            parsed.append((successor, frequency))

        total = sum(frequency for _, frequency in parsed)
        if abs(total - 1.0) > _SUM_TOLERANCE:
            raise CsvFormatError(line_number, f"frequencies sum to {total:.4f}, not 1")

        table.get_or_insert_execute(word, ensure_successor_context)
        context = table.get(word).value
        for successor, frequency in parsed:
            weight = round(frequency * _FREQUENCY_SCALE)
            if weight:
                context.add(successor, weight)
        rows += 1
    return rows