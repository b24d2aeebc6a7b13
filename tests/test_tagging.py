"""Tests for keyword country tagging."""

from newswatch.config.models import DEFAULT_COUNTRIES
from newswatch.tagging import build_tags, extract_countries


class TestExtractCountries:
    """Tests for extract_countries."""

    def test_matches_in_configured_order(self) -> None:
        text = "Russia and China signed an agreement on Tuesday."
        assert extract_countries(text, ["United States", "China", "Russia", "France"]) == [
            "China",
            "Russia",
        ]

    def test_case_insensitive(self) -> None:
        assert extract_countries("officials in CHINA said", ["China"]) == ["China"]
        assert extract_countries("officials in china said", ["China"]) == ["China"]

    def test_empty_text(self) -> None:
        assert extract_countries("", DEFAULT_COUNTRIES) == []

    def test_no_match(self) -> None:
        assert extract_countries("Local weather remains mild.", ["France", "Germany"]) == []

    def test_substring_semantics(self) -> None:
        # Plain substring matching: "UK" occurs inside "Ukraine"
        assert extract_countries("Ukraine", ["UK", "Ukraine"]) == ["UK", "Ukraine"]


class TestBuildTags:
    """Tests for build_tags."""

    def test_only_countries_populated(self) -> None:
        tags = build_tags("A summit in France.", DEFAULT_COUNTRIES)
        assert tags.countries == ["France"]
        assert tags.regions == []
        assert tags.organizations == []
        assert tags.events == []

    def test_empty_tags(self) -> None:
        tags = build_tags("", DEFAULT_COUNTRIES)
        assert tags.is_empty()
