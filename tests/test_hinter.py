import pytest

from lineedit.file_history import FileBackedHistory
from lineedit.hinter import (
    LIGHT_GRAY,
    CwdAwareHinter,
    DefaultHinter,
    Style,
    get_first_token,
    is_whitespace_str,
)
from lineedit.history_item import HistoryItem
from lineedit.sqlite_history import SqliteBackedHistory


def file_history(*commands):
    hist = FileBackedHistory()
    for cmd in commands:
        hist.save(HistoryItem.from_command_line(cmd))
    return hist


@pytest.fixture
def cwd_history():
    hist = SqliteBackedHistory.in_memory()
    hist.save(HistoryItem(command_line="ls -la", cwd="/a"))
    hist.save(HistoryItem(command_line="ls -lh", cwd="/b"))
    yield hist
    hist.close()


def test_is_whitespace_str():
    assert is_whitespace_str("")
    assert is_whitespace_str(" \t\n")
    assert not is_whitespace_str(" a ")


def test_first_token_takes_leading_whitespace_and_one_word():
    assert get_first_token(" foo bar") == " foo"
    assert get_first_token("foo bar") == "foo"


def test_first_token_edge_cases():
    assert get_first_token("") == ""
    assert get_first_token("   ") == "   "


def test_first_token_is_prefix_of_input():
    text = "  -m 'msg' more"
    token = get_first_token(text)
    assert text.startswith(token)
    assert token.strip()


def test_plain_style_paints_nothing():
    assert Style().paint("text") == "text"


def test_style_paint_wraps_with_reset():
    painted = Style(bold=True, fg=LIGHT_GRAY).paint("x")
    assert painted.startswith("\x1b[")
    assert painted.endswith("x\x1b[0m")


def test_default_hinter_suggests_rest_of_latest_match():
    hist = file_history("git status", "git commit -m msg")
    hinter = DefaultHinter()
    assert hinter.handle("git s", 5, hist, False, "/") == "tatus"
    assert hinter.complete_hint() == "tatus"
    assert hinter.handle("git", 3, hist, False, "/") == " commit -m msg"
    assert hinter.next_hint_token() == " commit"


def test_default_hinter_no_match():
    hinter = DefaultHinter()
    assert hinter.handle("zzz", 3, file_history("git status"), False, "/") == ""
    assert hinter.complete_hint() == ""
    assert hinter.next_hint_token() == ""


def test_default_hinter_min_chars():
    hist = file_history("git status")
    hinter = DefaultHinter().with_min_chars(5)
    assert hinter.handle("git", 3, hist, False, "/") == ""
    assert hinter.handle("git s", 5, hist, False, "/") == "tatus"


def test_default_hinter_coloring_uses_style():
    hist = file_history("git status")
    style = Style(italic=True, fg=LIGHT_GRAY)
    hinter = DefaultHinter().with_style(style)
    plain = hinter.handle("git", 3, hist, False, "/")
    colored = hinter.handle("git", 3, hist, True, "/")
    assert colored == style.paint(plain)
    assert hinter.complete_hint() == plain


def test_default_hinter_coloring_skipped_for_empty_hint():
    hinter = DefaultHinter()
    assert hinter.handle("nothing", 7, file_history("git status"), True, "/") == ""


def test_cwd_hinter_prefers_current_directory(cwd_history):
    hinter = CwdAwareHinter()
    assert hinter.handle("ls", 2, cwd_history, False, "/a") == " -la"
    assert hinter.handle("ls", 2, cwd_history, False, "/b") == " -lh"


def test_cwd_hinter_falls_back_to_any_directory(cwd_history):
    hinter = CwdAwareHinter()
    assert hinter.handle("ls", 2, cwd_history, False, "/elsewhere") == " -lh"


def test_cwd_hinter_falls_back_when_cwd_unsupported():
    hist = file_history("make all", "make test")
    hinter = CwdAwareHinter()
    assert hinter.handle("make", 4, hist, False, "/a") == " test"
    assert hinter.next_hint_token() == " test"


def test_cwd_hinter_min_chars_and_style(cwd_history):
    style = Style(underline=True)
    hinter = CwdAwareHinter().with_min_chars(3).with_style(style)
    assert hinter.handle("ls", 2, cwd_history, True, "/a") == ""
    assert hinter.handle("ls ", 3, cwd_history, True, "/a") == style.paint("-la")
    assert hinter.complete_hint() == "-la"