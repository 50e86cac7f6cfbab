"""
Tests for version string parsing.

Covers prefix/pre-release stripping, the numeric-only ordering, and the
failure modes that must surface as VersionParseError.
"""

import pytest
from hypothesis import given, strategies as st
from packaging.version import Version as PackagingVersion

from version_watch.core.compat import Version, parse_version
from version_watch.core.errors import VersionParseError

_numbers = st.integers(min_value=0, max_value=10**6)


class TestParseVersion:

    def test_plain_version(self):
        v = parse_version("1.2.3")
        assert v.core == (1, 2, 3)
        assert v.prerelease == ()
        assert v.build is None

    def test_v_prefix_is_stripped(self):
        assert parse_version("v0.1.1") == parse_version("0.1.1")

    def test_prerelease_is_ignored_for_equality(self):
        dev = parse_version("0.1.1-dev")
        assert dev == parse_version("0.1.1")
        assert hash(dev) == hash(parse_version("0.1.1"))

    def test_prerelease_label_is_retained(self):
        v = parse_version("v0.1.1-rc.2")
        assert v.prerelease == ("rc", "2")
        assert v.is_prerelease
        assert str(v) == "0.1.1-rc.2"

    def test_build_metadata_accepted(self):
        v = parse_version("1.0.0+build.7")
        assert v.core == (1, 0, 0)
        assert v.build == "build.7"
        assert str(v) == "1.0.0+build.7"

    def test_prerelease_with_build_metadata(self):
        v = parse_version("1.0.0-beta+exp.sha")
        assert v.prerelease == ("beta",)
        assert v.build == "exp.sha"

    def test_trailing_dash_only(self):
        assert parse_version("0.2.0-").core == (0, 2, 0)

    def test_ordering_is_numeric(self):
        assert parse_version("0.10.0") > parse_version("0.9.9")
        assert parse_version("1.0.0") > parse_version("0.99.99")
        assert parse_version("0.2.0-dev") > parse_version("0.1.9")
        assert not parse_version("0.1.1-dev") < parse_version("0.1.1")

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "garbage",
            "v",
            "1",
            "1.2",
            "1.2.x",
            "1.2.3.4",
            "1.2.3abc",
            " 1.2.3",
            "V1.2.3",
            "vv1.2.3",
            "-1.2.3",
            "1..3",
            "1.2.3+",
            "1.2.3 ",
            "1.2.3rc1",
            "1.2.3a",
            "1.2.3.post1",
            "1.2.3.dev0",
            "1!1.2.3",
            "v 1.2.3",
        ],
    )
    def test_invalid_versions(self, raw):
        with pytest.raises(VersionParseError) as excinfo:
            parse_version(raw)
        assert excinfo.value.raw == raw
        assert repr(raw) in str(excinfo.value)

    def test_release_is_a_packaging_version(self):
        v = parse_version("v0.1.1-dev")
        assert isinstance(v.release, PackagingVersion)
        assert v.release == PackagingVersion("0.1.1")
        assert v.release.release == (0, 1, 1)

    def test_leading_zeros_normalise(self):
        assert parse_version("01.02.003") == Version(1, 2, 3)

    def test_none_is_rejected(self):
        with pytest.raises(VersionParseError):
            parse_version(None)

    @given(_numbers, _numbers, _numbers)
    def test_numeric_round_trip(self, major, minor, patch):
        text = f"{major}.{minor}.{patch}"
        parsed = parse_version(text)
        assert parsed.core == (major, minor, patch)
        assert str(parsed) == text

    @given(_numbers, _numbers, _numbers, st.sampled_from(["dev", "alpha.1", "rc1", "SNAPSHOT"]))
    def test_prefix_and_suffix_never_change_identity(self, major, minor, patch, label):
        base = Version(major, minor, patch)
        assert parse_version(f"v{major}.{minor}.{patch}") == base
        assert parse_version(f"v{major}.{minor}.{patch}-{label}") == base
