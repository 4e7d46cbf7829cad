"""Pytest configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime

import pytest

from recording_identity.identity.schemas import PersonEntry, PersonRole
from recording_identity.models import Recording, SourceTag

RecordingFactory = Callable[..., Recording]


@pytest.fixture
def make_recording() -> RecordingFactory:
    """Factory for recordings with sensible defaults."""

    def _make(**overrides) -> Recording:
        fields = {
            "primary_id": None,
            "secondary_id": None,
            "title": "",
            "timestamp": None,
            "source_tag": SourceTag.CLOUD_API,
        }
        fields.update(overrides)
        return Recording(**fields)

    return _make


@pytest.fixture
def session_time() -> datetime:
    """Fixed session start for deterministic tests."""
    return datetime(2024, 3, 5, 15, 0, 0)


@pytest.fixture
def sample_roster() -> list[PersonEntry]:
    """Two coaches and three students."""
    return [
        PersonEntry(name="Jenny Duan", role=PersonRole.COACH, aliases=["JD"]),
        PersonEntry(name="Rishi Padmanabhan", role=PersonRole.COACH),
        PersonEntry(name="Aditi Bhaskar", role=PersonRole.STUDENT),
        PersonEntry(name="Arshiya Kumar", role=PersonRole.STUDENT, aliases=["Arshi"]),
        PersonEntry(name="Minseo Park", role=PersonRole.STUDENT),
    ]
