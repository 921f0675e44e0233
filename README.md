# wordchain

`wordchain` reads a text and records which word follows which. It then uses
those successor frequencies to generate new pseudo-random text.

## What it does

- **Analysis.** Text is split into tokens. A token is either a run of letters
  and digits, lower-cased, or one of the punctuation marks `.`, `?` and `!`.
  Every other character only separates words. A word keeps at most 30
  characters and anything longer is truncated. For every token the package
  counts the tokens that come right after it. The last token of the text
  counts as followed by the first, so every token has at least one successor.
- **Export.** The table can be written as CSV. Each line holds one word, then
  its successors in alphabetical order, each with its relative frequency to
  four decimals:

  ```
  previsioni,del,0.6667,di,0.3333
  ```

- **Import.** A CSV table in the same format can be loaded back. The
  frequencies on each line must add up to 1, within 0.001. They are stored as
  integer weights (frequency × 10000), which is enough to drive generation.
  The original counts are not recovered.
- **Generation.** Generation starts from a chosen word, or from a random
  sentence-ending mark (`.`, `?` or `!`) present in the table. Each successor
  is drawn with probability proportional to its count. A word that follows
  `.`, `?` or `!` is capitalised.
- **Pipeline mode.** Reading, analysis and CSV export can run on three
  separate threads, joined by a bounded word queue.

## Installation

```
pip install .
```

## Command line

```
wordchain <file> [--single] [--multi] [-g <n>] [-s <word>] [-e <file>] [-h]
```

| Option | Meaning |
| --- | --- |
| `<file>` | Text file to analyse, or a `.csv` frequency table to load |
| `--single` | Single-thread analysis; this is also what happens without `--multi` |
| `--multi` | Run the reader/analyser/exporter pipeline on threads |
| `-g <n>`, `--task2=<n>` | Generate `<n>` words from the table |
| `-s <word>`, `--start=<word>` | Word to start generating from; used only with `-g` |
| `-e <file>`, `--export=<file>` | After analysing a text, write the table as CSV to this file; generated text is appended to it |
| `-h`, `--help` | Show the help text |

Option values may also be given as a separate argument, for example
`--task2 20` or `-g 20`.

When the input is a `.csv` file, it is loaded and no CSV is written. With
`-e`, generated text is still appended to the export file. Without `-e`,
generated text goes to standard output. The command exits with status 1 in
these cases:

- the arguments are invalid;
- the input cannot be opened;
- a CSV table is malformed.

Examples:

```
wordchain story.txt -e table.csv
wordchain story.txt --multi -e table.csv
wordchain table.csv -g 20 -s previsioni
```

Generation falls back to a random `.`, `?` or `!` mark in two cases: when `-s`
is not given, and when the start word is not in the table. If the table has
none of those marks, nothing is generated.

## Library use

```python
import io
import random

from wordchain.rbtree import RBTree
from wordchain.analyzer import process_text
from wordchain.parser import export_csv
from wordchain.generator import generate_text

table = RBTree()
process_text(io.StringIO("Cosa dicono le previsioni del tempo?"), table)

out = io.StringIO()
export_csv(out, table)
print(out.getvalue())

words = generate_text(out, table, "?", 10, random.Random(1))
```

The building blocks:

- `wordchain.word.Word` is a word value truncated to `MAX_WORD_LENGTH` (30)
  characters.
- `wordchain.rbtree.RBTree` is a thread-safe red-black tree map, ordered and
  keyed by strings, with unique-key insertion.
  - Lookups: `get`, `in`, iteration in key order over `Node` objects, `items()`
    and `render()`.
  - Atomic check-then-update: `get_or_insert` and `get_or_insert_execute`.
  - Integer counters: `create_int_tree` and `int_get_or_insert`.
- `wordchain.analyzer` builds the successor table:
  - `SuccessorContext` holds one word's successor counts and their total.
  - `process_words` and `process_text` count adjacent token pairs.
  - `update_frequency`, `ensure_successor_context` and `increment_count` are
    the underlying steps.
- `wordchain.parser` handles tokens and CSV:
  - `iter_words` tokenises a stream.
  - `export_csv` writes the table and `import_csv` reads it.
  - Bad input raises `CsvFormatError`, a `ValueError` that carries the line
    number.
- `wordchain.generator` holds `pick_next_word` and `generate_text`. Pass any
  object with `randrange`, such as `random.Random`, as `rng` for reproducible
  output. `generate_text` writes the words and also returns them as a list.
- `wordchain.pipeline` runs analysis on threads:
  - `WordQueue` is a bounded FIFO that the producer marks finished.
  - `PipelineConfig`, `thread_reader`, `thread_analyzer` and `thread_exporter`
    are the pieces.
  - `run_multi_threaded_pipeline` runs them and re-raises the first error any
    thread met.
- `wordchain.cli` provides `parse_arguments`, which returns a `Config` or
  raises `ArgumentError`, and `main`.

## Limits

- Keys cannot be removed from an `RBTree`.
- A table cannot be updated except by adding counts.
- Iterating an `RBTree` does not take its lock. Guard iteration yourself if
  the tree may change at the same time.
- Text files are read as UTF-8.

## Running the tests

```
pip install .[test]
pytest
```