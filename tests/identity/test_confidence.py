"""Tests for similarity scoring components."""

from datetime import datetime, timedelta

import pytest

from recording_identity.identity.confidence import (
    DATE_TOLERANCE,
    composite_score,
    dates_within_tolerance,
    participant_overlap,
)

BASE = datetime(2024, 3, 5, 15, 0)


class TestDatesWithinTolerance:
    """Tests for dates_within_tolerance."""

    def test_exact_tolerance_is_inclusive(self, make_recording):
        a = make_recording(timestamp=BASE)
        b = make_recording(timestamp=BASE + DATE_TOLERANCE)

        assert dates_within_tolerance(a, b)

    def test_beyond_tolerance(self, make_recording):
        a = make_recording(timestamp=BASE)
        b = make_recording(timestamp=BASE + DATE_TOLERANCE + timedelta(seconds=1))

        assert not dates_within_tolerance(a, b)

    def test_missing_timestamp_never_matches(self, make_recording):
        assert not dates_within_tolerance(
            make_recording(timestamp=BASE), make_recording()
        )


class TestParticipantOverlap:
    """Tests for participant_overlap."""

    def test_ratio_uses_larger_list(self):
        overlap = participant_overlap(["Jenny", "Aditi"], ["jenny", "Aditi", "Rishi"])

        assert overlap == pytest.approx(2 / 3)

    def test_whole_names_only(self):
        """'Jen' does not match 'Jenny'."""
        assert participant_overlap(["Jen"], ["Jenny"]) == 0.0

    def test_empty_side(self):
        assert participant_overlap([], ["Jenny"]) == 0.0
        assert participant_overlap(["Jenny"], []) == 0.0


class TestCompositeScore:
    """Tests for composite_score."""

    def test_all_components(self, make_recording):
        a = make_recording(secondary_id="1", timestamp=BASE, participants=("A", "B"))
        b = make_recording(secondary_id="1", timestamp=BASE, participants=("A", "B"))

        assert composite_score(a, b) == 1.0

    def test_date_and_secondary_id_is_exactly_floor(self, make_recording):
        """0.4 + 0.2 lands exactly on 0.6."""
        a = make_recording(secondary_id="1", timestamp=BASE)
        b = make_recording(secondary_id="1", timestamp=BASE)

        assert composite_score(a, b) == 0.6

    def test_adding_shared_participant_never_lowers_score(self, make_recording):
        """Score is monotonic in participant overlap."""
        target = make_recording(
            secondary_id="1", timestamp=BASE, participants=("A", "B", "C")
        )
        scores = [
            composite_score(
                make_recording(timestamp=BASE, participants=names), target
            )
            for names in [(), ("A",), ("A", "B"), ("A", "B", "C")]
        ]

        assert scores == sorted(scores)

    def test_matching_date_never_lowers_score(self, make_recording):
        target = make_recording(timestamp=BASE, participants=("A",))
        far = make_recording(timestamp=BASE + timedelta(days=3), participants=("A",))
        near = make_recording(timestamp=BASE + timedelta(hours=2), participants=("A",))

        assert composite_score(near, target) > composite_score(far, target)
