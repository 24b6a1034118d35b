import pytest

from core.domain.models import ServerVersion
from core.domain.server_version import (
    extract_version_token,
    parse_version,
    parse_version_body,
    supports_standard_acl_endpoint,
)
from core.errors import ServerVersionError, VersionParseError


def _v(major: int, minor: int, patch: int) -> ServerVersion:
    return ServerVersion(major=major, minor=minor, patch=patch)


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ((11, 0, 0), False),
        ((11, 0, 1), False),
        ((11, 0, 2), True),
        ((11, 1, 0), True),
        ((10, 99, 99), False),
        ((12, 0, 0), True),
    ],
)
def test_classifier_boundaries(version, expected):
    assert supports_standard_acl_endpoint(_v(*version)) is expected


def test_classifier_major_12_and_up_always_supported():
    for major in (12, 13, 14, 99):
        for minor in (0, 1, 17):
            for patch in (0, 1, 2, 40):
                assert supports_standard_acl_endpoint(_v(major, minor, patch)) is True


def test_classifier_major_10_and_below_never_supported():
    for major in (0, 1, 9, 10):
        for minor in (0, 1, 99):
            for patch in (0, 2, 99):
                assert supports_standard_acl_endpoint(_v(major, minor, patch)) is False


def test_classifier_major_11_only_rejects_11_0_0_and_11_0_1():
    for minor in range(0, 4):
        for patch in range(0, 4):
            expected = not (minor == 0 and patch <= 1)
            assert supports_standard_acl_endpoint(_v(11, minor, patch)) is expected


def test_parse_plain_version():
    assert parse_version("12.3.0").as_tuple() == (12, 3, 0)


def test_parse_ignores_trailing_data_and_extra_components():
    assert parse_version("11.1.3+20140905.git.2").as_tuple() == (11, 1, 3)
    assert parse_version("12.0.0.rc.1").as_tuple() == (12, 0, 0)
    assert parse_version("11.0.2-1").as_tuple() == (11, 0, 2)


@pytest.mark.parametrize("text", ["", "abc", "12", "12.0", "x.1.2", "12.y.0", "12.0.", "-1.0.0"])
def test_parse_rejects_malformed_versions(text):
    with pytest.raises(VersionParseError):
        parse_version(text)


def test_parse_error_is_a_server_version_error():
    with pytest.raises(ServerVersionError):
        parse_version("garbage")


def test_extract_token_uses_last_word_of_first_line():
    body = "enterprise-chef 11.1.3\n\ncomponents:\n  opscode-account 1.2.3\n"
    assert extract_version_token(body) == "11.1.3"
    assert parse_version_body(body).as_tuple() == (11, 1, 3)


@pytest.mark.parametrize("body", ["", "\n", "   \nchef 12.0.0"])
def test_extract_token_rejects_empty_first_line(body):
    with pytest.raises(VersionParseError):
        extract_version_token(body)


def test_server_version_str():
    assert str(_v(11, 0, 1)) == "11.0.1"
