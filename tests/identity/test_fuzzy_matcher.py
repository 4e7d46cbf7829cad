"""Tests for fuzzy roster name matching."""

import pytest

from recording_identity.identity import FuzzyMatcher, PersonEntry, PersonRole


@pytest.fixture
def matcher() -> FuzzyMatcher:
    """Default matcher with 0.8 threshold."""
    return FuzzyMatcher()


class TestFindBestMatch:
    """Tests for find_best_match method."""

    def test_exact_match_returns_1_0(self, matcher, sample_roster):
        entry, score = matcher.find_best_match("Jenny Duan", sample_roster)

        assert entry.name == "Jenny Duan"
        assert score == 1.0

    def test_first_name_is_exact(self, matcher, sample_roster):
        """Titles usually carry first names only."""
        entry, score = matcher.find_best_match("minseo", sample_roster)

        assert entry.name == "Minseo Park"
        assert score == 1.0

    def test_alias_match(self, matcher, sample_roster):
        entry, score = matcher.find_best_match("Arshi", sample_roster)

        assert entry.name == "Arshiya Kumar"
        assert score == 1.0

    def test_concatenated_name(self, matcher, sample_roster):
        """'JennyDuan' from folder names maps to 'Jenny Duan'."""
        entry, score = matcher.find_best_match("JennyDuan", sample_roster)

        assert entry.name == "Jenny Duan"
        assert score == 0.95

    def test_name_order_independent(self, matcher, sample_roster):
        entry, score = matcher.find_best_match("Duan, Jenny", sample_roster)

        assert entry.name == "Jenny Duan"
        assert score >= 0.8

    def test_typo_scores_above_threshold(self, matcher, sample_roster):
        entry, score = matcher.find_best_match("Jeny", sample_roster)

        assert entry.name == "Jenny Duan"
        assert 0.8 <= score < 1.0

    def test_role_filter(self, matcher, sample_roster):
        """Restricting to students hides coaches."""
        entry, score = matcher.find_best_match(
            "Jenny", sample_roster, role=PersonRole.STUDENT
        )

        assert entry is None
        assert score == 0.0

    def test_unknown_name(self, matcher, sample_roster):
        assert matcher.find_best_match("Zed", sample_roster) == (None, 0.0)

    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query(self, matcher, sample_roster, query):
        assert matcher.find_best_match(query, sample_roster) == (None, 0.0)


class TestPersonEntry:
    """Tests for PersonEntry."""

    def test_first_name(self):
        entry = PersonEntry(name="Jenny Duan", role=PersonRole.COACH)

        assert entry.first_name == "Jenny"
