"""Domain models shared by the inference and matching engines."""

from recording_identity.models.recording import Recording, SourceTag, as_utc

__all__ = ["Recording", "SourceTag", "as_utc"]
