import threading

import pytest

from wordchain.rbtree import Color, RBTree, create_int_tree, int_get_or_insert


def black_height(node):
    if node is None:
        return 1
    left = black_height(node.left)
    right = black_height(node.right)
    assert left == right
    if node.color is Color.RED:
        assert node.left is None or node.left.color is Color.BLACK
        assert node.right is None or node.right.color is Color.BLACK
    return left + 1 if node.color is Color.BLACK else left


def test_int_insertion_and_search():
    tree = create_int_tree()
    int_get_or_insert(tree, "banana", 3)
    int_get_or_insert(tree, "apple", 5)
    node = tree.get("apple")
    assert node is not None
    assert node.value == 5
    assert node.key.text == "apple"


def test_missing_key_returns_none():
    tree = create_int_tree()
    int_get_or_insert(tree, "banana", 3)
    assert tree.get("cherry") is None
    assert "cherry" not in tree
    assert "banana" in tree


@pytest.mark.parametrize(
    "words",
    [
        ["mela", "pera", "banana", "kiwi", "uva"],
        ["a", "b", "c", "d", "e", "f", "g"],
        ["g", "f", "e", "d", "c", "b", "a"],
    ],
)
def test_structural_invariants(words):
    tree = create_int_tree()
    for i, w in enumerate(words):
        int_get_or_insert(tree, w, i)
    assert tree.root.color is Color.BLACK
    assert black_height(tree.root) >= 2
    assert [n.key.text for n in tree] == sorted(words)


def test_duplicate_key_policy():
    tree = create_int_tree()
    int_get_or_insert(tree, "test", 10)
    int_get_or_insert(tree, "test", 20)
    assert tree.get("test").value == 10
    assert len(tree) == 1


def test_insert_ignores_duplicates():
    tree = RBTree()
    tree.insert("k", "first")
    tree.insert("k", "second")
    assert tree.get("k").value == "first"
    assert len(tree) == 1


def test_iterator_sorting():
    tree = RBTree()
    for key in ["delta", "alpha", "charlie", "bravo"]:
        tree.insert(key, None)
    assert [n.key.text for n in tree] == ["alpha", "bravo", "charlie", "delta"]
    assert len(tree) == 4


def test_iterator_empty_tree():
    tree = RBTree()
    assert list(tree) == []
    assert len(tree) == 0


def test_items():
    tree = create_int_tree()
    int_get_or_insert(tree, "b", 2)
    int_get_or_insert(tree, "a", 1)
    assert list(tree.items()) == [("a", 1), ("b", 2)]


def test_get_or_insert_execute_reports_insertion():
    tree = RBTree()
    calls = []

    def action(node, was_inserted):
        calls.append(was_inserted)
        node.value = 1 if was_inserted else node.value + 1

    tree.get_or_insert_execute("w", action)
    tree.get_or_insert_execute("w", action)
    tree.get_or_insert_execute("w", action)
    assert calls == [True, False, False]
    assert tree.get("w").value == 3


def test_render():
    tree = create_int_tree()
    int_get_or_insert(tree, "b", 1)
    int_get_or_insert(tree, "a", 0)
    int_get_or_insert(tree, "c", 2)
    assert tree.render() == "a => 0 (RED)\nb => 1 (BLACK)\nc => 2 (RED)\n"


def test_render_without_value_formatter():
    tree = RBTree()
    tree.insert("x", 42)
    assert tree.render() == "x =>  (BLACK)\n"


def test_long_keys_are_truncated():
    tree = RBTree()
    long_key = "k" * 50
    tree.insert(long_key, 1)
    node = tree.get(long_key)
    assert node.key.text == "k" * 30
    assert tree.get("k" * 30) is node


def test_multithreaded_insertion():
    tree = create_int_tree()
    num_threads, per_thread = 10, 1000

    def worker(tid):
        for i in range(per_thread):
            int_get_or_insert(tree, f"t{tid}_key{i}", i)

    threads = [threading.Thread(target=worker, args=(t,)) for t in range(num_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(tree) == num_threads * per_thread
    keys = [n.key.text for n in tree]
    assert keys == sorted(keys)
    assert tree.root.color is Color.BLACK
    black_height(tree.root)