import io
import threading

import pytest

from wordchain.analyzer import (
    SuccessorContext,
    ensure_successor_context,
    increment_count,
    process_text,
    process_words,
    update_frequency,
)
from wordchain.parser import export_csv
from wordchain.rbtree import RBTree

TEST_STRING = (
    "Cosa dicono le previsioni del tempo? Previsioni del tempo di oggi: "
    "tempo incerto! Previsioni di domani?"
)

EXPECTED_CSV = (
    "!,previsioni,1.0000\n"
    "?,cosa,0.5000,previsioni,0.5000\n"
    "cosa,dicono,1.0000\n"
    "del,tempo,1.0000\n"
    "di,domani,0.5000,oggi,0.5000\n"
    "dicono,le,1.0000\n"
    "domani,?,1.0000\n"
    "incerto,!,1.0000\n"
    "le,previsioni,1.0000\n"
    "oggi,tempo,1.0000\n"
    "previsioni,del,0.6667,di,0.3333\n"
    "tempo,?,0.3333,di,0.3333,incerto,0.3333\n"
)


@pytest.fixture
def weather_table():
    table = RBTree()
    process_text(io.StringIO(TEST_STRING), table)
    return table


def test_csv_integration(weather_table):
    out = io.StringIO()
    export_csv(out, weather_table)
    assert out.getvalue() == EXPECTED_CSV


def test_previsioni_successors(weather_table):
    ctx = weather_table.get("previsioni").value
    assert ctx.total_entries == 3
    assert ctx.tree.get("del").value == 2


def test_tempo_followed_by_question_mark(weather_table):
    ctx = weather_table.get("tempo").value
    assert ctx.tree.get("?").value == 1


def test_last_token_points_back_to_first(weather_table):
    ctx = weather_table.get("?").value
    assert ctx.tree.get("cosa").value == 1


def test_process_text_file_on_disk(tmp_path):
    path = tmp_path / "test_meteo.txt"
    path.write_text(TEST_STRING, encoding="utf-8")
    table = RBTree()
    with path.open(encoding="utf-8") as stream:
        process_text(stream, table)
    out = io.StringIO()
    export_csv(out, table)
    assert out.getvalue() == EXPECTED_CSV


def test_empty_input_leaves_table_empty():
    table = RBTree()
    process_text(io.StringIO(""), table)
    assert len(table) == 0


def test_single_word_follows_itself():
    table = RBTree()
    process_words(["ciao"], table)
    ctx = table.get("ciao").value
    assert ctx.total_entries == 1
    assert ctx.tree.get("ciao").value == 1


def test_totals_match_successor_counts(weather_table):
    for _, ctx in weather_table.items():
        assert ctx.total_entries == sum(count for _, count in ctx.tree.items())


def test_ensure_successor_context_only_on_insert():
    table = RBTree()
    table.get_or_insert_execute("a", ensure_successor_context)
    first = table.get("a").value
    table.get_or_insert_execute("a", ensure_successor_context)
    assert table.get("a").value is first
    assert first.total_entries == 0


def test_increment_count_action():
    tree = RBTree()
    for _ in range(3):
        tree.get_or_insert_execute("x", increment_count)
    assert tree.get("x").value == 3


def test_successor_context_add_rejects_non_positive():
    ctx = SuccessorContext()
    with pytest.raises(ValueError):
        ctx.add("a", 0)
    assert ctx.total_entries == 0


def test_successor_context_add_counts():
    ctx = SuccessorContext()
    ctx.add("b", 2)
    ctx.add("b")
    ctx.add("a")
    assert ctx.total_entries == 4
    assert dict(ctx.tree.items()) == {"a": 1, "b": 3}


def test_concurrent_updates_are_counted():
    table = RBTree()
    per_thread = 200
    threads = [
        threading.Thread(target=lambda: [update_frequency(table, "a", "b") for _ in range(per_thread)])
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    ctx = table.get("a").value
    assert ctx.total_entries == 8 * per_thread
    assert ctx.tree.get("b").value == 8 * per_thread