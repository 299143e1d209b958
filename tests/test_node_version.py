import json
from pathlib import Path

import pytest

from hooklangs.node_version import (
    EXTRA_KEY_LTS,
    NodeRequest,
    NodeVersion,
    lts_from_json,
    lts_to_json,
)
from hooklangs.versionreq import InvalidVersionError, ToolchainInfo, Version, VersionReq


@pytest.mark.parametrize(
    "text, expected",
    [
        ("node", NodeRequest()),
        ("node12", NodeRequest(version=(12,))),
        ("node12.18", NodeRequest(version=(12, 18))),
        ("node12.18.3", NodeRequest(version=(12, 18, 3))),
        ("lts/Argon", NodeRequest(code_name="Argon")),
        ("", NodeRequest()),
        ("12", NodeRequest(version=(12,))),
        ("12.18", NodeRequest(version=(12, 18))),
        ("12.18.3", NodeRequest(version=(12, 18, 3))),
        (">=12.18", NodeRequest(requirement=VersionReq.parse(">=12.18"))),
    ],
)
def test_node_request_from_str(text, expected):
    assert NodeRequest.parse(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "node12.18.3.4",
        "node12.18.3a",
        "node12.18.x",
        "node^12.18.3",
        "invalid",
        "lts/$$$",
    ],
)
def test_node_request_invalid(text):
    with pytest.raises(InvalidVersionError):
        NodeRequest.parse(text)


@pytest.fixture
def install_info():
    return ToolchainInfo(
        language_version=Version(12, 18, 3),
        toolchain=Path("/usr/bin/node"),
        extra={EXTRA_KEY_LTS: '"Argon"'},
    )


@pytest.mark.parametrize(
    "request_, expected",
    [
        (NodeRequest(version=(12,)), True),
        (NodeRequest(version=(12, 18)), True),
        (NodeRequest(version=(12, 18, 3)), True),
        (NodeRequest(code_name="Argon"), True),
        (NodeRequest(code_name="argon"), True),
        (NodeRequest(code_name="Boron"), False),
        (NodeRequest(path=Path("/usr/bin/node")), True),
        (NodeRequest(path=Path("/usr/bin/nodejs")), False),
        (NodeRequest(requirement=VersionReq.parse(">=12.18")), True),
        (NodeRequest(requirement=VersionReq.parse(">=13.0")), False),
    ],
)
def test_node_request_satisfied_by(install_info, request_, expected):
    assert request_.satisfied_by(install_info) is expected


def test_any_request_is_any_and_satisfied(install_info):
    request = NodeRequest.parse("node")
    assert request.is_any
    assert request.satisfied_by(install_info)


def test_code_name_without_lts_extra_not_satisfied():
    info = ToolchainInfo(language_version=Version(12, 18, 3))
    assert not NodeRequest(code_name="Argon").satisfied_by(info)


def test_bad_lts_extra_is_treated_as_not_lts():
    info = ToolchainInfo(language_version=Version(12, 18, 3), extra={EXTRA_KEY_LTS: "{"})
    assert not NodeRequest(code_name="Argon").satisfied_by(info)
    assert NodeRequest(version=(12,)).satisfied_by(info)


def test_path_match_without_toolchain():
    assert not NodeRequest(path=Path("/usr/bin/node")).matches(NodeVersion(), None)


def test_node_version_parse_with_code_name():
    version = NodeVersion.parse("12.18.3-Argon")
    assert version.version == Version(12, 18, 3)
    assert version.lts == "Argon"
    assert (version.major, version.minor, version.patch) == (12, 18, 3)


@pytest.mark.parametrize("text", ["12.18.3", "12.18.3-Argon", "20.1.0"])
def test_node_version_str_round_trip(text):
    assert str(NodeVersion.parse(text)) == text


def test_node_version_parse_invalid():
    with pytest.raises(ValueError):
        NodeVersion.parse("12.18")


def test_node_version_from_json():
    version = NodeVersion.from_json({"version": "v12.18.3", "lts": "Argon"})
    assert version == NodeVersion(Version(12, 18, 3), "Argon")
    plain = NodeVersion.from_json({"version": "v20.1.0", "lts": False})
    assert plain.lts is None


def test_node_version_from_json_missing_lts():
    with pytest.raises(ValueError):
        NodeVersion.from_json({"version": "v12.18.3"})


def test_node_version_default():
    assert NodeVersion() == NodeVersion(Version(0, 0, 0), None)


@pytest.mark.parametrize("value", [False, None, 3, ["x"]])
def test_lts_from_json_non_string(value):
    assert lts_from_json(value) is None


@pytest.mark.parametrize("code_name", ["Argon", None])
def test_lts_json_round_trip(code_name):
    encoded = json.dumps(lts_to_json(code_name))
    assert lts_from_json(json.loads(encoded)) == code_name


def test_lts_to_json_not_lts_is_false():
    assert lts_to_json(None) is False


def test_sorting_by_version():
    versions = [NodeVersion.parse(t) for t in ["18.0.0", "20.1.0-Iron", "16.3.1"]]
    ordered = sorted(versions, key=lambda v: v.version, reverse=True)
    assert [str(v) for v in ordered] == ["20.1.0-Iron", "18.0.0", "16.3.1"]