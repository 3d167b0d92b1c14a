import threading

import pytest

from lineedit.external_printer import EXTERNAL_PRINTER_DEFAULT_CAPACITY, ExternalPrinter


def test_default_capacity():
    assert ExternalPrinter().capacity == EXTERNAL_PRINTER_DEFAULT_CAPACITY == 20


def test_empty_printer_returns_none():
    assert ExternalPrinter().get_line() is None


def test_lines_come_out_in_order():
    printer = ExternalPrinter(5)
    for line in ["one", "two", "three"]:
        printer.print(line)
    assert [printer.get_line() for _ in range(4)] == ["one", "two", "three", None]


def test_accepts_any_displayable_value():
    printer = ExternalPrinter()
    printer.print(42)
    assert printer.get_line() == 42


@pytest.mark.parametrize("cap", [0, -3, 1.5, True])
def test_invalid_capacity(cap):
    with pytest.raises(ValueError):
        ExternalPrinter(cap)


def test_print_blocks_when_full():
    printer = ExternalPrinter(1)
    printer.print("first")
    worker = threading.Thread(target=printer.print, args=("second",))
    worker.start()
    worker.join(timeout=0.2)
    assert worker.is_alive()
    assert printer.get_line() == "first"
    worker.join(timeout=5)
    assert not worker.is_alive()
    assert printer.get_line() == "second"


def test_concurrent_producers_deliver_everything():
    printer = ExternalPrinter(4)
    lines = [f"msg {i}" for i in range(30)]
    workers = [threading.Thread(target=printer.print, args=(line,)) for line in lines]
    for w in workers:
        w.start()
    received = []
    while len(received) < len(lines):
        line = printer.get_line()
        if line is not None:
            received.append(line)
    for w in workers:
        w.join(timeout=5)
    assert sorted(received) == sorted(lines)
    assert printer.get_line() is None