import pytest

from hooklangs.printer import Printer


@pytest.mark.parametrize(
    ("printer", "enabled"),
    [
        (Printer.DEFAULT, True),
        (Printer.QUIET, False),
        (Printer.VERBOSE, True),
        (Printer.NO_PROGRESS, True),
    ],
)
def test_streams_enabled(printer, enabled):
    assert printer.stdout_enabled() is enabled
    assert printer.stderr_enabled() is enabled


@pytest.mark.parametrize(
    ("printer", "shown"),
    [
        (Printer.DEFAULT, True),
        (Printer.QUIET, False),
        (Printer.VERBOSE, False),
        (Printer.NO_PROGRESS, False),
    ],
)
def test_show_progress(printer, shown):
    assert printer.show_progress() is shown


def test_default_writes_both_streams(capsys):
    Printer.DEFAULT.write_stdout("out text\n")
    Printer.DEFAULT.write_stderr("err text\n")
    captured = capsys.readouterr()
    assert captured.out == "out text\n"
    assert captured.err == "err text\n"


def test_quiet_writes_nothing(capsys):
    Printer.QUIET.write_stdout("out text\n")
    Printer.QUIET.write_stderr("err text\n")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_no_progress_still_writes(capsys):
    Printer.NO_PROGRESS.write_stdout("hello")
    assert capsys.readouterr().out == "hello"