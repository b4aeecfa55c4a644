from __future__ import annotations

import pytest

from dotnet_outdated.models.version import NuGetVersion
from dotnet_outdated.models.version_range import VersionRange
from dotnet_outdated.exceptions import MalformedRangeError


def v(text: str) -> NuGetVersion:
    return NuGetVersion.parse(text)


@pytest.mark.unit
class TestVersionRangeParse:
    """Tests for the supported range notations."""

    def test_plain_version_is_inclusive_minimum(self) -> None:
        r = VersionRange.parse("1.0")

        assert r.min_version == v("1.0.0")
        assert r.is_min_inclusive is True
        assert r.max_version is None
        assert r.is_floating is False

    def test_exact_version(self) -> None:
        r = VersionRange.parse("[1.0]")

        assert r.min_version == r.max_version == v("1.0")
        assert r.is_min_inclusive and r.is_max_inclusive

    def test_inclusive_open_ceiling(self) -> None:
        r = VersionRange.parse("[1.0, )")

        assert r.min_version == v("1.0")
        assert r.is_min_inclusive is True
        assert r.max_version is None
        assert r.is_max_inclusive is False

    def test_exclusive_minimum(self) -> None:
        r = VersionRange.parse("(1.0, )")

        assert r.min_version == v("1.0")
        assert r.is_min_inclusive is False

    def test_only_maximum(self) -> None:
        r = VersionRange.parse("(, 1.0]")

        assert r.min_version is None
        assert r.has_lower_bound is False
        assert r.max_version == v("1.0")
        assert r.is_max_inclusive is True

    def test_bounded_range(self) -> None:
        r = VersionRange.parse("[1.0,2.0)")

        assert r.min_version == v("1.0")
        assert r.max_version == v("2.0")
        assert r.is_min_inclusive is True
        assert r.is_max_inclusive is False

    def test_whitespace_tolerated(self) -> None:
        assert VersionRange.parse("  [ 1.0 ,  2.0 ]  ") == VersionRange.parse("[1.0,2.0]")

    def test_floating_minor(self) -> None:
        r = VersionRange.parse("1.*")

        assert r.is_floating is True
        assert r.min_version == v("1.0")
        assert r.is_min_inclusive is True

    def test_floating_prerelease_label(self) -> None:
        r = VersionRange.parse("1.0.0-beta*")

        assert r.min_version == v("1.0.0-beta")
        assert r.min_version.is_prerelease

    def test_floating_any_prerelease(self) -> None:
        r = VersionRange.parse("1.0.0-*")

        assert r.min_version == v("1.0.0-0")
        assert r.min_version.is_prerelease

    def test_floating_star(self) -> None:
        r = VersionRange.parse("*")

        assert r.is_floating is True
        assert r.min_version == v("0.0.0")

    def test_prerelease_minimum(self) -> None:
        r = VersionRange.parse("[2.0.0-rc.1, )")

        assert r.min_version.is_prerelease is True

    @pytest.mark.parametrize(
        "spec, floor",
        [
            ("1.2.0", "1.2.0"),
            ("1.2", "1.2"),
            ("[1.2.0]", "1.2.0"),
            ("[1.2.0, )", "1.2.0"),
            ("(1.2.0, )", "1.2.0"),
            ("[1.2.0, 2.0.0)", "1.2.0"),
            ("[2.0.0-rc.1, )", "2.0.0-rc.1"),
            ("2.0.0-alpha", "2.0.0-alpha"),
            ("[1.0.0.4, 2.0]", "1.0.0.4"),
        ],
    )
    def test_floor_is_embedded_version(self, spec: str, floor: str) -> None:
        assert str(VersionRange.parse(spec).min_version) == floor

    @pytest.mark.parametrize(
        "spec, floor",
        [
            ("[1.*, )", "1.0.0"),
            ("[6.0.*, )", "6.0.0"),
            ("[*, )", "0.0.0"),
            ("[1.0.0-*, )", "1.0.0-0"),
            ("[1.0.0-beta.*, 2.0.0)", "1.0.0-beta.0"),
            ("*-*", "0.0.0-0"),
            ("1.*-*", "1.0.0-0"),
            ("[1.*-*, )", "1.0.0-0"),
        ],
    )
    def test_floating_notations(self, spec: str, floor: str) -> None:
        r = VersionRange.parse(spec)

        assert r.is_floating is True
        assert r.is_min_inclusive is True
        assert r.min_version == v(floor)

    def test_floating_minimum_inside_brackets_keeps_ceiling(self) -> None:
        r = VersionRange.parse("[3.*, 4.0)")

        assert r.min_version == v("3.0")
        assert r.max_version == v("4.0")
        assert r.satisfies(v("3.9.1"))
        assert not r.satisfies(v("4.0"))

    def test_floating_label_floor_is_prerelease(self) -> None:
        assert VersionRange.parse("1.*-*").min_version.is_prerelease
        assert not VersionRange.parse("[1.*, )").min_version.is_prerelease

    @pytest.mark.parametrize(
        "spec",
        [
            "",
            "   ",
            "[1.0",
            "1.0]",
            "[1.0, 2.0, 3.0]",
            "(1.0)",
            "[1.0)",
            "[]",
            "[,]",
            "(,)",
            "[2.0, 1.0]",
            "(1.0, 1.0)",
            "[1.0, 1.0)",
            "1.*.0",
            "1*",
            "**",
            "abc",
            "[abc, )",
            "[1.*]",
            "(1.*, )",
            "[1.0, 2.*)",
            "1.*-beta",
            "1.0.0-*-*",
            "*.1",
        ],
    )
    def test_malformed_ranges(self, spec: str) -> None:
        with pytest.raises(MalformedRangeError) as exc_info:
            VersionRange.parse(spec)

        assert exc_info.value.range_spec is not None

    def test_equal_inclusive_bounds_are_exact(self) -> None:
        r = VersionRange.parse("[1.0, 1.0]")

        assert r.min_version == r.max_version == v("1.0")


@pytest.mark.unit
class TestVersionRangeQueries:
    """Tests for satisfies(), pretty and str()."""

    def test_satisfies_bounded(self) -> None:
        r = VersionRange.parse("[1.0, 2.0)")

        assert r.satisfies(v("1.0"))
        assert r.satisfies(v("1.9.9"))
        assert not r.satisfies(v("2.0"))
        assert not r.satisfies(v("0.9"))

    def test_satisfies_exclusive_minimum(self) -> None:
        r = VersionRange.parse("(1.0, )")

        assert not r.satisfies(v("1.0"))
        assert r.satisfies(v("1.0.1"))

    def test_satisfies_inclusive_maximum(self) -> None:
        r = VersionRange.parse("(, 1.0]")

        assert r.satisfies(v("1.0"))
        assert r.satisfies(v("0.1"))
        assert not r.satisfies(v("1.0.1"))

    def test_pretty(self) -> None:
        assert VersionRange.parse("1.2").pretty == "[1.2.0, )"
        assert VersionRange.parse("[1.0]").pretty == "[1.0.0]"
        assert VersionRange.parse("(, 2.0)").pretty == "(, 2.0.0)"

    def test_str_returns_original(self) -> None:
        assert str(VersionRange.parse(" 1.* ")) == "1.*"
        assert str(VersionRange(min_version=v("1.0"), is_min_inclusive=True)) == "[1.0.0, )"

    def test_original_not_part_of_equality(self) -> None:
        assert VersionRange.parse("1.0") == VersionRange.parse("[1.0, )")

    def test_pretty_round_trips(self) -> None:
        for spec in ("[1.0, 2.0)", "(1.0, )", "(, 3.0]", "[4.0]"):
            r = VersionRange.parse(spec)
            assert VersionRange.parse(r.pretty) == r
