"""
Text-only diarization: ask the LLM to split the transcript into role-labeled turns.

Used when acoustic segments are unavailable or unreliable (e.g. similar voices).
Timestamps are recovered mechanically by realign_text_segments. On failure the
caller gets the aligner's no-segments fallback (one default-speaker utterance).
"""
from __future__ import annotations

import logging
from typing import Any, Sequence

from speakerline.config import Settings, get_settings, split_roles
from speakerline.services.llm_client import ChatCompletionClient
from speakerline.transcript.aligner import DEFAULT_SPEAKER, align_words
from speakerline.transcript.models import Utterance, Word
from speakerline.transcript.resegment import TextSegment, realign_text_segments

logger = logging.getLogger(__name__)

_RESEGMENT_PROMPT = """You are an expert transcription assistant.
I will provide a raw transcript of a conversation. The transcript currently has NO speaker labels.

Your task is to SEGMENT the text into turns for these speakers: {roles}.

INPUT TEXT:
"{text}"

INSTRUCTIONS:
1. Split the text into logical turns based on context.
2. Return a JSON object {{"segments": [{{"speaker": <one of {roles}>, "text": "..."}}, ...]}}.
3. CRITICAL: Do NOT change, add, or remove words. The text in the segments must MATCH the input text exactly, just split up.
4. If you are unsure, make a best guess based on dialogue patterns."""


def build_resegment_prompt(full_text: str, roles: Sequence[str]) -> str:
    return _RESEGMENT_PROMPT.format(roles=", ".join(roles), text=full_text)


def parse_text_segments(payload: Any) -> list[TextSegment]:
    """
    Accept [...] or {"segments": [...]} / {"turns": [...]}.
    Drops items without string text; a missing speaker becomes DEFAULT_SPEAKER.
    Raises ValueError when nothing usable remains.
    """
    if isinstance(payload, dict):
        payload = payload.get("segments") or payload.get("turns") or []
    if not isinstance(payload, list):
        raise ValueError(f"Expected list of segments, got {type(payload).__name__}")

    segments: list[TextSegment] = []
    for item in payload:
        if not isinstance(item, dict) or not isinstance(item.get("text"), str):
            continue
        segments.append(TextSegment(speaker=str(item.get("speaker") or DEFAULT_SPEAKER), text=item["text"]))
    if not segments:
        raise ValueError("Empty segments returned")
    return segments


async def resegment_words(
    words: Sequence[Word],
    client: ChatCompletionClient | None = None,
    settings: Settings | None = None,
) -> list[Utterance] | None:
    """
    Split the transcript into role-labeled utterances via the LLM.
    Returns None when disabled, on any failure, or when no segment could be realigned.
    """
    if not words:
        return None

    settings = settings or (client.settings if client else get_settings())
    if not settings.RESEGMENT_ENABLED:
        return None
    client = client or ChatCompletionClient(settings)
    full_text = " ".join(w.text for w in words)
    prompt = build_resegment_prompt(full_text, split_roles(settings.RESEGMENT_ROLES))

    try:
        segments = parse_text_segments(await client.complete_json(prompt))
    except Exception as e:
        logger.warning("LLM text diarization failed: %s", e)
        return None

    utterances = realign_text_segments(words, segments)
    if not utterances:
        logger.warning("LLM text diarization produced no usable segments")
        return None
    logger.info("LLM text diarization: %d segments -> %d utterances", len(segments), len(utterances))
    return utterances


async def diarize_with_llm(
    words: Sequence[Word],
    client: ChatCompletionClient | None = None,
    settings: Settings | None = None,
) -> list[Utterance]:
    """resegment_words, falling back to align_words(words, []) when it yields nothing."""
    utterances = await resegment_words(words, client, settings)
    if utterances is None:
        return align_words(words, [])
    return utterances
