from __future__ import annotations

import pytest

from dotnet_outdated.models.version import NuGetVersion
from dotnet_outdated.core.prerelease import PrereleaseReporting, resolve_eligibility

STABLE = NuGetVersion.parse("1.0.0")
PRERELEASE = NuGetVersion.parse("2.0.0-beta.1")


@pytest.mark.unit
class TestPrereleaseReporting:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("auto", PrereleaseReporting.AUTO),
            ("Always", PrereleaseReporting.ALWAYS),
            (" NEVER ", PrereleaseReporting.NEVER),
        ],
    )
    def test_from_string(self, text: str, expected: PrereleaseReporting) -> None:
        assert PrereleaseReporting.from_string(text) is expected

    def test_from_string_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="auto, always, never"):
            PrereleaseReporting.from_string("sometimes")

    def test_values_are_strings(self) -> None:
        assert PrereleaseReporting.AUTO == "auto"


@pytest.mark.unit
class TestResolveEligibility:
    """The policy decision table."""

    @pytest.mark.parametrize(
        "policy, referenced, expected",
        [
            (PrereleaseReporting.ALWAYS, STABLE, True),
            (PrereleaseReporting.ALWAYS, PRERELEASE, True),
            (PrereleaseReporting.NEVER, STABLE, False),
            (PrereleaseReporting.NEVER, PRERELEASE, False),
            (PrereleaseReporting.AUTO, STABLE, False),
            (PrereleaseReporting.AUTO, PRERELEASE, True),
        ],
    )
    def test_decision_table(
        self,
        policy: PrereleaseReporting,
        referenced: NuGetVersion,
        expected: bool,
    ) -> None:
        assert resolve_eligibility(policy, referenced) is expected

    def test_missing_referenced_version(self) -> None:
        with pytest.raises(TypeError):
            resolve_eligibility(PrereleaseReporting.ALWAYS, None)
