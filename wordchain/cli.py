"""Command-line front end: analyse a text or load a table, then generate text."""

from __future__ import annotations

import os
import random
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from typing import IO, Iterator, Optional, Sequence

from .analyzer import process_text
from .generator import generate_text
from .parser import CsvFormatError, export_csv, import_csv
from .pipeline import run_multi_threaded_pipeline
from .rbtree import RBTree

PROG = "wordchain"
_ERROR_PREFIX = "Analyzer"


@dataclass
class Config:
    """Options gathered from the command line."""

    input_file: str = ""
    export_file: Optional[str] = None
    t2_start_word: Optional[str] = None
    t2_count: int = 0
    is_multi: bool = False
    do_task1: bool = False
    do_export: bool = False
    do_task2: bool = False
    help_requested: bool = False


class ArgumentError(ValueError):
    """Raised when the command line cannot be parsed; holds every problem found."""

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


@dataclass(frozen=True)
class _Option:
    dest: str
    short: Optional[str]
    long: str
    metavar: Optional[str]
    help: str

    @property
    def syntax(self) -> str:
        long_part = f"--{self.long}" + (f"={self.metavar}" if self.metavar else "")
        return f"-{self.short}|{long_part}" if self.short else long_part

    @property
    def label(self) -> str:
        long_part = f"--{self.long}" + (f"={self.metavar}" if self.metavar else "")
        return f"-{self.short}, {long_part}" if self.short else long_part


_OPTIONS = (
    _Option("single", None, "single", None, "Force single-thread mode"),
    _Option("multi", None, "multi", None, "Force multi-thread mode"),
    _Option("task2", "g", "task2", "<n>", "Enable Task 2: generate <n> words (mandatory count)"),
    _Option("start", "s", "start", "<word>", "Optional starting word for generation"),
    _Option("export", "e", "export", "<file>", "Export to CSV (Task 1) or Text (Task 2)"),
    _Option("help", "h", "help", None, "Print this help message"),
)
_BY_SHORT = {option.short: option for option in _OPTIONS if option.short}
_BY_LONG = {option.long: option for option in _OPTIONS}
_INPUT_METAVAR = "<file>"
_INPUT_HELP = "Input file (.txt or .csv)"


def _help_text() -> str:
    syntax = " ".join([_INPUT_METAVAR] + [f"[{option.syntax}]" for option in _OPTIONS])
    lines = [f"Usage: {PROG} {syntax}", "", "Options:"]
    lines.append(f"  {_INPUT_METAVAR:<25} {_INPUT_HELP}")
    lines.extend(f"  {option.label:<25} {option.help}" for option in _OPTIONS)
    return "\n".join(lines) + "\n"


def _scan(args: Sequence[str], errors: list[str]) -> tuple[list[str], dict[str, list[Optional[str]]]]:
    positionals: list[str] = []
    seen: dict[str, list[Optional[str]]] = {}
    tokens: Iterator[str] = iter(args)

    def record(option: _Option, value: Optional[str]) -> None:
        seen.setdefault(option.dest, []).append(value)

    for arg in tokens:
        if arg == "--":
            positionals.extend(tokens)
            break
        if arg.startswith("--"):
            name, has_inline, inline = arg[2:].partition("=")
            option = _BY_LONG.get(name)
            if option is None:
                errors.append(f'invalid option "{arg}"')
            elif option.metavar is None:
                if has_inline:
                    errors.append(f'option "--{name}" takes no argument')
                else:
                    record(option, None)
            else:
                value = inline if has_inline else next(tokens, None)
                if value is None:
                    errors.append(f"option {option.syntax} requires an argument")
                else:
                    record(option, value)
        elif arg.startswith("-") and arg != "-":
            option = _BY_SHORT.get(arg[1])
            if option is None:
                errors.append(f'invalid option "{arg}"')
            elif option.metavar is None:
                if len(arg) > 2:
                    errors.append(f'invalid option "{arg}"')
                else:
                    record(option, None)
            else:
                value = arg[2:] or next(tokens, None)
                if value is None:
                    errors.append(f"option {option.syntax} requires an argument")
                else:
                    record(option, value)
        else:
            positionals.append(arg)
    return positionals, seen


def parse_arguments(argv: Optional[Sequence[str]] = None) -> Config:
    """Parse the command line (without the program name) into a ``Config``.

    A request for help wins over any other problem. Raises ``ArgumentError``
    listing every problem otherwise.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    errors: list[str] = []
    positionals, seen = _scan(args, errors)

    if "help" in seen:
        return Config(help_requested=True)

    if not positionals:
        errors.append(f"missing option {_INPUT_METAVAR}")
    errors.extend(f'unexpected argument "{extra}"' for extra in positionals[1:])
    for dest, values in seen.items():
        if len(values) > 1:
            errors.append(f"excess option {_BY_LONG[dest].syntax}")

    count = 0
    if "task2" in seen:
        raw = seen["task2"][0]
        try:
            count = int(raw)
        except ValueError:
            errors.append(f'invalid argument "{raw}" to option {_BY_LONG["task2"].syntax}')

    if errors:
        raise ArgumentError(errors)

    input_file = positionals[0]
    do_export = "export" in seen
    do_task2 = "task2" in seen
    return Config(
        input_file=input_file,
        export_file=seen["export"][0] if do_export else None,
        t2_start_word=seen["start"][0] if do_task2 and "start" in seen else None,
        t2_count=count if do_task2 else 0,
        is_multi="multi" in seen,
        do_task1=".txt" in input_file,
        do_export=do_export,
        do_task2=do_task2,
    )


def _load_table(config: Config, table: RBTree) -> int:
    is_csv = os.path.splitext(config.input_file)[1] == ".csv"
    if is_csv:
        print(f"[INFO] Loading frequency table from CSV: {config.input_file}")
        try:
            with open(config.input_file, encoding="utf-8") as stream:
                import_csv(stream, table)
        except OSError as exc:
            print(f"Error opening CSV file: {exc}", file=sys.stderr)
            return 1
        except CsvFormatError as exc:
            print(f"Error reading CSV file: {exc}", file=sys.stderr)
            return 1
    elif config.is_multi:
        print("[INFO] Running Task 1 in Multi-thread mode...")
        try:
            run_multi_threaded_pipeline(
                config.input_file, config.export_file, table, config.do_export
            )
        except OSError as exc:
            print(f"Error in analysis pipeline: {exc}", file=sys.stderr)
            return 1
    else:
        print("[INFO] Running Task 1 in Single-thread mode...")
        try:
            with open(config.input_file, encoding="utf-8") as stream:
                process_text(stream, table)
        except OSError as exc:
            print(f"Error opening input file: {exc}", file=sys.stderr)
            return 1
        if config.do_export and config.export_file:
            print(f"[INFO] Exporting to CSV: {config.export_file}")
            try:
                with open(config.export_file, "w", encoding="utf-8") as out:
                    export_csv(out, table)
            except OSError as exc:
                print(f"Error opening export file: {exc}", file=sys.stderr)
    return 0


def _generate(config: Config, table: RBTree, rng: random.Random) -> None:
    with ExitStack() as stack:
        out: IO[str] = sys.stdout
        if config.do_export and config.export_file:
            try:
                out = stack.enter_context(open(config.export_file, "a", encoding="utf-8"))
            except OSError:
                out = sys.stdout
        print(f"[INFO] Task 2: Generating {config.t2_count} words...\n")
        generate_text(out, table, config.t2_start_word, config.t2_count, rng)
    print()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the analyzer; return the process exit status."""
    try:
        config = parse_arguments(argv)
    except ArgumentError as exc:
        for message in exc.messages:
            print(f"{_ERROR_PREFIX}: {message}")
        print("\nTry '--help' for more information.")
        return 1

    if config.help_requested:
        print(_help_text(), end="")
        return 0

    table = RBTree()
    status = _load_table(config, table)
    if status:
        return status

    if config.do_task2:
        _generate(config, table, random.Random())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())