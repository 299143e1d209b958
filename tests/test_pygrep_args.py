import json

import pytest

from hooklangs.pygrep_args import (
    PygrepArgs,
    PygrepError,
    PygrepErrorKind,
    parse_script_error,
    parse_status,
)


def test_parse_empty():
    assert PygrepArgs.parse([]) == PygrepArgs(False, False, False)


def test_parse_all_flags():
    args = PygrepArgs.parse(["-i", "--multiline", "--negate"])
    assert args == PygrepArgs(ignore_case=True, multiline=True, negate=True)


def test_parse_long_ignore_case():
    assert PygrepArgs.parse(["--ignore-case"]).ignore_case is True


def test_parse_unknown():
    with pytest.raises(ValueError, match="Unknown argument: --foo"):
        PygrepArgs.parse(["--multiline", "--foo"])


def test_to_args():
    assert PygrepArgs(True, False, True).to_args() == ["1", "0", "1"]
    assert PygrepArgs().to_args() == ["0", "0", "0"]


def test_parse_status_code():
    assert parse_status(json.dumps({"code": 1})) == 1
    assert parse_status(b'{"code": 0}') == 0


def test_parse_status_missing_or_odd_code():
    assert parse_status("{}") == 0
    assert parse_status('{"code": "1"}') == 0
    assert parse_status(json.dumps({"code": 2**40})) == 0


def test_parse_status_invalid_json():
    with pytest.raises(ValueError, match="Failed to parse status code JSON"):
        parse_status("not json")


def test_script_error_regex():
    err = parse_script_error(json.dumps({"type": "Regex", "message": "bad"}), 1)
    assert isinstance(err, PygrepError)
    assert err.kind is PygrepErrorKind.REGEX
    assert str(err) == "Failed to parse regex: bad"


def test_script_error_io_and_unknown():
    io = parse_script_error('{"type": "IO", "message": "m"}', 1)
    unknown = parse_script_error('{"type": "Unknown", "message": "m"}', 1)
    assert str(io) == "IO error: m"
    assert str(unknown) == "Unknown error: m"


def test_script_error_empty_stderr():
    err = parse_script_error("   \n", 2)
    assert isinstance(err, RuntimeError)
    assert str(err) == "Python script failed with exit code 2 but produced no error output"


def test_script_error_plain_text():
    err = parse_script_error(b"  Traceback: boom \n", None)
    assert isinstance(err, RuntimeError)
    assert str(err) == "Python script failed with exit code -1: Traceback: boom"


def test_script_error_unknown_type_is_plain_text():
    text = '{"type": "Other", "message": "m"}'
    err = parse_script_error(text, 3)
    assert not isinstance(err, PygrepError)
    assert str(err) == f"Python script failed with exit code 3: {text}"