"""Tests for the cross-source matching cascade."""

from datetime import datetime, timedelta

import pytest

from recording_identity.identity import (
    IdentityResolver,
    MatchMethod,
    MatchStatus,
    TargetIndex,
    find_match,
)

BASE = datetime(2024, 3, 5, 15, 0)


@pytest.fixture
def resolver() -> IdentityResolver:
    return IdentityResolver()


class TestExactMatch:
    """Primary id strategy."""

    def test_exact_regardless_of_other_fields(self, resolver, make_recording):
        """A shared primary id is exact even if nothing else agrees."""
        target = make_recording(
            primary_id="abc==", timestamp=BASE, participants=("Jenny", "Aditi")
        )
        query = make_recording(
            primary_id="abc==",
            timestamp=BASE + timedelta(days=30),
            participants=("Someone",),
        )

        result = resolver.find_match(query, TargetIndex.build([target]))

        assert result.status is MatchStatus.EXACT
        assert result.confidence == 1.0
        assert result.matched_identity == target
        assert result.method is MatchMethod.PRIMARY_ID


class TestSecondaryIdDate:
    """Secondary id + date strategy."""

    def test_same_meeting_same_day(self, resolver, make_recording):
        target = make_recording(primary_id="t1", secondary_id="8675309", timestamp=BASE)
        query = make_recording(
            primary_id="q1", secondary_id="8675309", timestamp=BASE + timedelta(hours=3)
        )

        result = resolver.find_match(query, TargetIndex.build([target]))

        assert result.status is MatchStatus.FUZZY_HIGH
        assert result.confidence == 0.9
        assert result.method is MatchMethod.SECONDARY_ID_DATE

    def test_recurring_meeting_other_day_is_retained(self, resolver, make_recording):
        """A shared meeting id on another day is only weak evidence."""
        target = make_recording(
            primary_id="t1",
            secondary_id="8675309",
            timestamp=BASE - timedelta(days=7),
            participants=("Jenny", "Aditi"),
        )
        query = make_recording(
            secondary_id="8675309", timestamp=BASE, participants=("Jenny", "Aditi")
        )

        result = resolver.find_match(query, TargetIndex.build([target]))

        assert result.status is MatchStatus.FUZZY_LOW
        assert result.confidence == 0.7
        assert result.method is MatchMethod.SIMILARITY
        assert result.requires_review
        assert [c.record for c in result.candidates] == [target]


class TestDateParticipants:
    """Same date + participant overlap strategy."""

    def test_full_overlap_is_high(self, resolver, make_recording):
        target = make_recording(primary_id="t1", timestamp=BASE, participants=("Jenny", "Aditi"))
        query = make_recording(timestamp=BASE + timedelta(hours=1), participants=("jenny", "aditi"))

        result = resolver.find_match(query, TargetIndex.build([target]))

        assert result.method is MatchMethod.DATE_PARTICIPANTS
        assert result.confidence == 0.8
        assert result.status is MatchStatus.FUZZY_HIGH

    def test_partial_overlap_is_low(self, resolver, make_recording):
        target = make_recording(
            primary_id="t1", timestamp=BASE, participants=("Jenny", "Aditi", "Rishi")
        )
        query = make_recording(timestamp=BASE, participants=("Jenny", "Aditi"))

        result = resolver.find_match(query, TargetIndex.build([target]))

        assert result.method is MatchMethod.DATE_PARTICIPANTS
        assert result.confidence == pytest.approx(0.533333, abs=1e-6)
        assert result.status is MatchStatus.FUZZY_LOW


    def test_half_overlap_falls_through_to_similarity(self, resolver, make_recording):
        """Overlap of exactly 0.5 is not enough for the date strategy."""
        target = make_recording(
            primary_id="t1", timestamp=BASE, participants=("Jenny", "Rishi")
        )
        query = make_recording(
            timestamp=BASE + timedelta(hours=2), participants=("Jenny", "Aditi")
        )

        result = resolver.find_match(query, TargetIndex.build([target]))

        assert result.method is MatchMethod.SIMILARITY
        assert result.confidence == 0.6
        assert result.status is MatchStatus.FUZZY_LOW
        assert result.matched_identity == target


class TestSimilarity:
    """Weighted similarity scan and status boundaries."""

    def test_score_of_0_8_is_high(self, resolver, make_recording):
        """Within 24h across midnight with the same participants."""
        target = make_recording(
            primary_id="t1", timestamp=datetime(2024, 3, 6, 1, 0), participants=("A", "B")
        )
        query = make_recording(timestamp=datetime(2024, 3, 5, 23, 0), participants=("A", "B"))

        result = resolver.find_match(query, TargetIndex.build([target]))

        assert result.method is MatchMethod.SIMILARITY
        assert result.confidence == 0.8
        assert result.status is MatchStatus.FUZZY_HIGH

    def test_score_of_0_6_is_low(self, resolver, make_recording):
        """Date plus half the participants lands exactly on the floor."""
        target = make_recording(primary_id="t1", timestamp=BASE, participants=("Jenny", "Rishi"))
        query = make_recording(timestamp=BASE, participants=("Jenny", "Aditi"))

        result = resolver.find_match(query, TargetIndex.build([target]))

        assert result.confidence == 0.6
        assert result.status is MatchStatus.FUZZY_LOW

    def test_below_floor_is_unmatched(self, resolver, make_recording):
        target = make_recording(primary_id="t1", timestamp=BASE, participants=("Rishi",))
        query = make_recording(timestamp=BASE, participants=("Jenny",))

        result = resolver.find_match(query, TargetIndex.build([target]))

        assert result.status is MatchStatus.UNMATCHED
        assert result.confidence == 0.0
        assert result.matched_identity is None
        assert result.method is MatchMethod.NONE

    def test_ties_keep_insertion_order(self, resolver, make_recording):
        first = make_recording(primary_id="t1", timestamp=BASE, participants=("A", "C"))
        second = make_recording(primary_id="t2", timestamp=BASE, participants=("A", "D"))
        query = make_recording(timestamp=BASE, participants=("A", "B"))

        result = resolver.find_match(query, TargetIndex.build([first, second]))

        assert result.matched_identity == first
        assert [c.record for c in result.candidates] == [first, second]

    def test_at_most_three_candidates(self, resolver, make_recording):
        targets = [
            make_recording(primary_id=f"t{i}", timestamp=BASE, participants=("A", f"X{i}"))
            for i in range(5)
        ]
        query = make_recording(timestamp=BASE, participants=("A", "B"))

        result = resolver.find_match(query, TargetIndex.build(targets))

        assert len(result.candidates) == 3


class TestResolverProperties:
    """Purity and multi-index behaviour."""

    def test_deterministic_and_pure(self, make_recording):
        target = make_recording(primary_id="t1", timestamp=BASE, participants=("A", "B"))
        query = make_recording(timestamp=BASE, participants=("A", "C"))
        index = TargetIndex.build([target])
        snapshot = (index.records, dict(index.by_date))

        first = find_match(query, index)
        second = find_match(query, index)

        assert first == second
        assert (index.records, dict(index.by_date)) == snapshot

    def test_best_match_prefers_exact(self, resolver, make_recording):
        fuzzy_target = make_recording(primary_id="t1", secondary_id="9", timestamp=BASE)
        exact_target = make_recording(primary_id="q1")
        query = make_recording(primary_id="q1", secondary_id="9", timestamp=BASE)

        result = resolver.find_best_match(
            query,
            [TargetIndex.build([fuzzy_target], "a"), TargetIndex.build([exact_target], "b")],
        )

        assert result.status is MatchStatus.EXACT
        assert result.matched_identity == exact_target

    def test_best_match_ties_keep_first_index(self, resolver, make_recording):
        a = make_recording(primary_id="t1", secondary_id="9", timestamp=BASE)
        b = make_recording(primary_id="t2", secondary_id="9", timestamp=BASE)
        query = make_recording(secondary_id="9", timestamp=BASE)
        indices = [TargetIndex.build([a], "first"), TargetIndex.build([b], "second")]

        result, index = resolver.locate(query, indices)

        assert result.matched_identity == a
        assert index.name == "first"

    def test_best_match_unmatched_everywhere(self, resolver, make_recording):
        query = make_recording(primary_id="q1")

        result, index = resolver.locate(query, [TargetIndex.build([], "empty")])

        assert result.status is MatchStatus.UNMATCHED
        assert index is None

    def test_match_all_keeps_order(self, resolver, make_recording):
        index = TargetIndex.build([make_recording(primary_id="a"), make_recording(primary_id="b")])
        queries = [make_recording(primary_id="b"), make_recording(primary_id="a")]

        results = resolver.match_all(queries, index)

        assert [r.query_key for r in results] == ["b", "a"]
