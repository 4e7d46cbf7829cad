"""Build Recording objects from raw source payloads.

Three ingestion paths feed the engine:
- Cloud API polling: one recording object per payload
- Webhooks: the recording object wrapped in ``payload.object``
- File store: a standardized folder name plus its ancestor folders
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog

from recording_identity.extraction import (
    extract_participants,
    extract_speakers,
    parse_folder_name,
    parse_timestamp,
)
from recording_identity.models import Recording, SourceTag

logger = structlog.get_logger()


def _duration_seconds(minutes: Any) -> int:
    # Source payloads report whole minutes
    try:
        return max(0, int(float(minutes) * 60))
    except (TypeError, ValueError):
        return 0


def _participant_names(raw: Iterable[Any] | None) -> list[str]:
    names: list[str] = []
    for item in raw or ():
        if isinstance(item, Mapping):
            name = item.get("name") or item.get("user_name")
        else:
            name = item
        if isinstance(name, str) and name.strip() and name.strip() not in names:
            names.append(name.strip())
    return names


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def from_cloud_api(
    payload: Mapping[str, Any],
    transcript: str | None = None,
    source_tag: SourceTag = SourceTag.CLOUD_API,
) -> Recording:
    """Map a cloud API recording object to a Recording.

    Participants come from the payload's participant list, then from
    transcript speakers, then from the title.

    Args:
        payload: Recording object (uuid, id, topic, start_time, duration, ...)
        transcript: Optional WebVTT transcript content
        source_tag: Ingestion path to record

    Returns:
        Recording for the payload
    """
    title = str(payload.get("topic") or "")
    participants = _participant_names(payload.get("participants"))
    if not participants and transcript:
        participants = extract_speakers(transcript)
    if not participants:
        participants = extract_participants(title)

    raw_start = payload.get("start_time")
    timestamp = parse_timestamp(raw_start)
    if raw_start and timestamp is None:
        logger.warning(
            "Unparseable start time",
            uuid=payload.get("uuid"),
            start_time=raw_start,
        )

    return Recording(
        primary_id=_optional_str(payload.get("uuid")),
        secondary_id=_optional_str(payload.get("id") or payload.get("meeting_id")),
        title=title,
        timestamp=timestamp,
        duration_seconds=_duration_seconds(payload.get("duration")),
        participants=tuple(participants),
        source_tag=source_tag,
        description=_optional_str(payload.get("agenda")),
    )


def from_webhook(payload: Mapping[str, Any], transcript: str | None = None) -> Recording:
    """Map a webhook event body to a Recording.

    Accepts either the full event (``{"event": ..., "payload": {"object": ...}}``)
    or the inner ``payload`` mapping.

    Raises:
        ValueError: If the body carries no recording object
    """
    inner = payload.get("payload", payload)
    recording = inner.get("object") if isinstance(inner, Mapping) else None
    if not isinstance(recording, Mapping):
        raise ValueError("Webhook payload has no recording object")
    return from_cloud_api(recording, transcript=transcript, source_tag=SourceTag.WEBHOOK)


def from_file_store(folder_name: str, ancestors: Sequence[str] = ()) -> Recording:
    """Map a file-store folder to a Recording.

    Args:
        folder_name: The recording's own folder name
        ancestors: Enclosing folder names, outermost first

    Returns:
        Recording whose context_path ends with folder_name (title left empty;
        the folder name is evidence for the folder tier)
    """
    identity = parse_folder_name(folder_name)
    timestamp = parse_timestamp(identity.session_date) if identity.session_date else None
    participants = identity.participants or tuple(extract_participants(folder_name))

    return Recording(
        primary_id=identity.primary_id,
        secondary_id=identity.secondary_id,
        timestamp=timestamp,
        participants=participants,
        source_tag=SourceTag.FILE_STORE,
        context_path=(*ancestors, folder_name),
    )
