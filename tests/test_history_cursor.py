import threading

import pytest

from lineedit.file_history import FileBackedHistory
from lineedit.history_base import (
    NormalNavigation,
    PrefixSearch,
    SearchDirection,
    SearchQuery,
    SubstringSearch,
)
from lineedit.history_cursor import HistoryCursor
from lineedit.history_item import HistoryItem


def create_history():
    return FileBackedHistory(), HistoryCursor(NormalNavigation(), None)


def get_all_entry_texts(hist):
    return [e.command_line for e in hist.search(SearchQuery.everything(SearchDirection.FORWARD, None))]


def add_text_entries(hist, entries):
    for entry in entries:
        hist.save(HistoryItem.from_command_line(entry))


def save_all(hist, *lines):
    add_text_entries(hist, lines)


def test_accessing_empty_history_returns_nothing():
    _hist, cursor = create_history()
    assert cursor.string_at_cursor() is None


def test_going_forward_in_empty_history_does_not_error_out():
    hist, cursor = create_history()
    cursor.forward(hist)
    assert cursor.string_at_cursor() is None


def test_going_backwards_in_empty_history_does_not_error_out():
    hist, cursor = create_history()
    cursor.back(hist)
    assert cursor.string_at_cursor() is None


def test_going_backwards_bottoms_out():
    hist, cursor = create_history()
    save_all(hist, "command1", "command2")
    for _ in range(5):
        cursor.back(hist)
    assert cursor.string_at_cursor() == "command1"


def test_going_forwards_bottoms_out():
    hist, cursor = create_history()
    save_all(hist, "command1", "command2")
    for _ in range(5):
        cursor.forward(hist)
    assert cursor.string_at_cursor() is None


def test_appends_only_unique():
    hist, _ = create_history()
    save_all(hist, "unique_old", "test", "test", "unique")
    assert hist.count_all() == 3


def test_prefix_search_works():
    hist, _ = create_history()
    save_all(hist, "find me as well", "test", "find me")
    cursor = HistoryCursor(PrefixSearch("find"), None)
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me"
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me as well"


def test_prefix_search_bottoms_out():
    hist, _ = create_history()
    save_all(hist, "find me as well", "test", "find me")
    cursor = HistoryCursor(PrefixSearch("find"), None)
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me"
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me as well"
    for _ in range(4):
        cursor.back(hist)
    assert cursor.string_at_cursor() == "find me as well"


def test_prefix_search_returns_to_none():
    hist, _ = create_history()
    save_all(hist, "find me as well", "test", "find me")
    cursor = HistoryCursor(PrefixSearch("find"), None)
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me"
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me as well"
    cursor.forward(hist)
    assert cursor.string_at_cursor() == "find me"
    cursor.forward(hist)
    assert cursor.string_at_cursor() is None
    cursor.forward(hist)
    assert cursor.string_at_cursor() is None


def test_prefix_search_ignores_consecutive_equivalent_entries_going_backwards():
    hist, _ = create_history()
    save_all(hist, "find me as well", "find me once", "test", "find me once")
    cursor = HistoryCursor(PrefixSearch("find"), None)
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me once"
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me as well"


def test_prefix_search_ignores_consecutive_equivalent_entries_going_forwards():
    hist, _ = create_history()
    save_all(hist, "find me once", "test", "find me once", "find me as well")
    cursor = HistoryCursor(PrefixSearch("find"), None)
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me as well"
    cursor.back(hist)
    cursor.back(hist)
    assert cursor.string_at_cursor() == "find me once"
    cursor.forward(hist)
    assert cursor.string_at_cursor() == "find me as well"
    cursor.forward(hist)
    assert cursor.string_at_cursor() is None


def test_substring_search_works():
    hist, _ = create_history()
    save_all(
        hist,
        "substring",
        "don't find me either",
        "prefix substring",
        "don't find me",
        "prefix substring suffix",
    )
    cursor = HistoryCursor(SubstringSearch("substring"), None)
    cursor.back(hist)
    assert cursor.string_at_cursor() == "prefix substring suffix"
    cursor.back(hist)
    assert cursor.string_at_cursor() == "prefix substring"
    cursor.back(hist)
    assert cursor.string_at_cursor() == "substring"


def test_substring_search_with_empty_value_returns_none():
    hist, _ = create_history()
    save_all(hist, "substring")
    cursor = HistoryCursor(SubstringSearch(""), None)
    assert cursor.string_at_cursor() is None


def test_get_navigation_returns_query():
    cursor = HistoryCursor(PrefixSearch("abc"), None)
    assert cursor.get_navigation() == PrefixSearch("abc")


def test_normal_navigation_walks_all_entries():
    hist, cursor = create_history()
    save_all(hist, "a", "b", "c")
    seen = []
    for _ in range(3):
        cursor.back(hist)
        seen.append(cursor.string_at_cursor())
    assert seen == ["c", "b", "a"]


def test_unknown_query_type_is_rejected():
    hist, _ = create_history()
    save_all(hist, "a")
    cursor = HistoryCursor("not a query", None)
    with pytest.raises(TypeError):
        cursor.back(hist)


def test_writes_to_new_file(tmp_path):
    histfile = tmp_path / "nested_path" / ".history"
    entries = ["test", "text", "more test text"]
    with FileBackedHistory.with_file(5, histfile) as hist:
        add_text_entries(hist, entries)
    with FileBackedHistory.with_file(5, histfile) as reading:
        assert get_all_entry_texts(reading) == entries


def test_persists_newlines_in_entries(tmp_path):
    histfile = tmp_path / ".history"
    entries = [
        "test",
        "multiline\nentry\nunix",
        "multiline\r\nentry\r\nwindows",
        "more test text",
    ]
    with FileBackedHistory.with_file(5, histfile) as hist:
        add_text_entries(hist, entries)
    with FileBackedHistory.with_file(5, histfile) as reading:
        assert get_all_entry_texts(reading) == entries


def test_truncates_file_to_capacity(tmp_path):
    histfile = tmp_path / ".history"
    capacity = 5
    expected_truncated = ["test 4", "test 5", "test 6", "test 7", "test 8"]

    with FileBackedHistory.with_file(capacity, histfile) as hist:
        add_text_entries(hist, ["test 1", "test 2"])

    with FileBackedHistory.with_file(capacity, histfile) as hist:
        add_text_entries(hist, ["test 3", "test 4"])
        assert get_all_entry_texts(hist) == ["test 1", "test 2", "test 3", "test 4"]

    with FileBackedHistory.with_file(capacity, histfile) as hist:
        add_text_entries(hist, ["test 5", "test 6", "test 7", "test 8"])
        assert get_all_entry_texts(hist) == expected_truncated

    with FileBackedHistory.with_file(capacity, histfile) as reading:
        assert get_all_entry_texts(reading) == expected_truncated


def test_truncates_too_large_file(tmp_path):
    histfile = tmp_path / ".history"
    previous = [f"test {i}" for i in range(1, 9)]
    expected_truncated = ["test 4", "test 5", "test 6", "test 7", "test 8"]

    with FileBackedHistory.with_file(10, histfile) as hist:
        add_text_entries(hist, previous)

    with FileBackedHistory.with_file(5, histfile) as hist:
        assert get_all_entry_texts(hist) == expected_truncated

    with FileBackedHistory.with_file(5, histfile) as reading:
        assert get_all_entry_texts(reading) == expected_truncated


def test_concurrent_histories_do_not_erase_each_other(tmp_path):
    histfile = tmp_path / ".history"
    capacity = 7

    with FileBackedHistory.with_file(capacity, histfile) as hist:
        add_text_entries(hist, ["test 1", "test 2", "test 3", "test 4", "test 5"])

    with FileBackedHistory.with_file(capacity, histfile) as hist_a:
        with FileBackedHistory.with_file(capacity, histfile) as hist_b:
            add_text_entries(hist_b, ["B1", "B2", "B3"])
        add_text_entries(hist_a, ["A1", "A2", "A3"])

    with FileBackedHistory.with_file(capacity, histfile) as reading:
        assert get_all_entry_texts(reading) == ["test 5", "B1", "B2", "B3", "A1", "A2", "A3"]


def test_concurrent_histories_are_threadsafe(tmp_path):
    histfile = tmp_path / ".history"
    num_threads = 16
    capacity = 2 * num_threads + 1

    with FileBackedHistory.with_file(capacity, histfile) as hist:
        add_text_entries(hist, [f"initial {i}" for i in range(capacity)])

    errors = []

    def worker(i):
        try:
            with FileBackedHistory.with_file(capacity, histfile) as hist:
                hist.save(HistoryItem.from_command_line(f"A{i}"))
                hist.sync()
                hist.save(HistoryItem.from_command_line(f"B{i}"))
        except Exception as exc:  # collected and asserted below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(num_threads)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    with FileBackedHistory.with_file(capacity, histfile) as reading:
        actual = get_all_entry_texts(reading)

    assert f"initial {capacity - 1}" in actual
    for i in range(num_threads):
        assert f"A{i}" in actual
        assert f"B{i}" in actual