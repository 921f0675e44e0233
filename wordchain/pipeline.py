"""Three-thread reader, analyzer and exporter pipeline over a bounded word queue."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from .analyzer import process_words
from .parser import export_csv, iter_words
from .rbtree import RBTree
from .word import Word

QUEUE_MAX_CAPACITY = 1024
"""Default number of words the shared queue holds before the reader blocks."""


class WordQueue:
    """Bounded, thread-safe FIFO of words that the producer can mark finished."""

    def __init__(self, capacity: int = QUEUE_MAX_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._items: deque[Word] = deque()
        self._finished = False
        self._lock = threading.Lock()
        self._not_full = threading.Condition(self._lock)
        self._not_empty = threading.Condition(self._lock)

    def put(self, word: Word) -> None:
        """Append ``word``, waiting while the queue is full."""
        with self._not_full:
            while len(self._items) >= self.capacity:
                self._not_full.wait()
            self._items.append(word)
            self._not_empty.notify()

    def get(self) -> Optional[Word]:
        """Remove and return the oldest word; ``None`` once finished and drained."""
        with self._not_empty:
            while not self._items and not self._finished:
                self._not_empty.wait()
            if not self._items:
                return None
            word = self._items.popleft()
            self._not_full.notify()
            return word

    def finish(self) -> None:
        """Signal that no more words will be put."""
        with self._lock:
            self._finished = True
            self._not_empty.notify_all()

    def __iter__(self) -> Iterator[Word]:
        while (word := self.get()) is not None:
            yield word

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


@dataclass
class PipelineConfig:
    """Everything the pipeline threads share."""

    input_path: str
    export_path: Optional[str]
    main_tree: RBTree
    do_export: bool = False
    queue: WordQueue = field(default_factory=WordQueue)
    errors: list[BaseException] = field(default_factory=list)


def thread_reader(config: PipelineConfig) -> None:
    """Tokenise the input file into the queue, then mark the queue finished."""
    with open(config.input_path, encoding="utf-8") as stream:
        for word in iter_words(stream):
            config.queue.put(word)
    config.queue.finish()


def thread_analyzer(config: PipelineConfig) -> None:
    """Consume the queue and count its word pairs into the shared tree."""
    process_words(config.queue, config.main_tree)


def thread_exporter(config: PipelineConfig, analysis_done: threading.Event) -> None:
    """Wait for the analysis to end, then write the CSV if one was requested.

    Nothing is written if an earlier stage failed.
    """
    analysis_done.wait()
    if not config.do_export or config.export_path is None or config.errors:
        return
    with open(config.export_path, "w", encoding="utf-8") as out:
        export_csv(out, config.main_tree)


def _run_reader(config: PipelineConfig) -> None:
    try:
        thread_reader(config)
    except BaseException as exc:  # reported by the coordinating thread
        config.errors.append(exc)
    finally:
        config.queue.finish()


def _run_analyzer(config: PipelineConfig, analysis_done: threading.Event) -> None:
    try:
        thread_analyzer(config)
    except BaseException as exc:
        config.errors.append(exc)
        for _ in config.queue:
            pass
    finally:
        analysis_done.set()


def _run_exporter(config: PipelineConfig, analysis_done: threading.Event) -> None:
    try:
        thread_exporter(config, analysis_done)
    except BaseException as exc:
        config.errors.append(exc)


def run_multi_threaded_pipeline(
    input_path: str,
    export_path: Optional[str],
    tree: RBTree,
    do_export: bool,
) -> None:
    """Analyse ``input_path`` into ``tree`` with three cooperating threads.

    The first error raised by any stage is re-raised once all threads end.
    """
    config = PipelineConfig(input_path, export_path, tree, do_export)
    analysis_done = threading.Event()
    targets: list[tuple[Callable[..., Any], tuple[Any, ...]]] = [
        (_run_reader, (config,)),
        (_run_analyzer, (config, analysis_done)),
        (_run_exporter, (config, analysis_done)),
    ]
    threads = [threading.Thread(target=target, args=args) for target, args in targets]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    if config.errors:
        raise config.errors[0]