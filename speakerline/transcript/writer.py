"""
Transcript rendering: utterances -> plain text lines or JSON.

Text format, one utterance per line:
    [MM:SS.ss] [A] hello there        (timestamps optional)
JSON format: list of {speaker, text, start, end} (ms), ready for API output.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Literal, Sequence

from speakerline.transcript.models import Utterance

logger = logging.getLogger(__name__)

TranscriptFormat = Literal["text", "json"]


def _format_timestamp(ms: float) -> str:
    """[MM:SS.ss] from milliseconds."""
    elapsed_sec = max(0.0, ms) / 1000.0
    mm = int(elapsed_sec // 60)
    ss = elapsed_sec % 60
    return f"[{mm:02d}:{ss:05.2f}]"


def format_utterance_line(utterance: Utterance, add_timestamps: bool = False) -> str:
    """Format one line with optional [MM:SS.ss] and [speaker] prefix."""
    parts: list[str] = []
    if add_timestamps:
        parts.append(_format_timestamp(utterance.start_ms))
    if utterance.speaker:
        parts.append(f"[{utterance.speaker}]")
    parts.append(utterance.text.strip())
    return " ".join(parts)


def render_transcript(
    utterances: Sequence[Utterance],
    fmt: TranscriptFormat = "text",
    add_timestamps: bool = False,
) -> str:
    if fmt == "json":
        return json.dumps([u.to_dict() for u in utterances], ensure_ascii=False, indent=2)
    if fmt == "text":
        return "\n".join(format_utterance_line(u, add_timestamps) for u in utterances)
    raise ValueError(f"Unknown transcript format: {fmt!r}")


def write_transcript(
    path: str,
    utterances: Sequence[Utterance],
    fmt: TranscriptFormat = "text",
    add_timestamps: bool = False,
) -> str:
    """Write rendered transcript to path (parent dirs created). Returns path."""
    content = render_transcript(utterances, fmt, add_timestamps)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content + "\n")
    logger.info("Transcript written: %s (%d utterances)", path, len(utterances))
    return path
