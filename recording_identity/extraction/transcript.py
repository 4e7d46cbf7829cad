"""Speaker extraction from VTT transcripts."""

from io import StringIO

import structlog
import webvtt

logger = structlog.get_logger()


def extract_speakers(content: str | None) -> list[str]:
    """Return unique speaker names in order of first appearance.

    Speakers come from voice tags (``<v Jenny Duan>Hello``). Captions
    without a voice tag are ignored. Malformed transcripts yield an
    empty list.

    Args:
        content: Raw WebVTT file content (UTF-8 decoded)

    Returns:
        Speaker display names, possibly empty
    """
    if not content:
        return []

    stripped = content.strip()
    if not stripped or stripped == "WEBVTT":
        return []

    try:
        captions = webvtt.from_buffer(StringIO(content), format="vtt")
    except Exception as e:
        logger.warning("Unparseable transcript", error=str(e))
        return []

    speakers: list[str] = []
    for caption in captions:
        if caption.voice and caption.voice not in speakers:
            speakers.append(caption.voice)
    return speakers
