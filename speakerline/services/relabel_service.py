"""
Role relabeling: map generic speaker symbols (A, B) to roles (e.g. Doctor / Patient).

Only the speaker field may change; text, times, count and order never do.
Any failure returns the input utterances unchanged: relabeling is an enhancement,
never a reason to fail transcript processing.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Mapping, Sequence

from speakerline.config import Settings, get_settings, split_roles
from speakerline.services.llm_client import ChatCompletionClient
from speakerline.transcript.models import Utterance

logger = logging.getLogger(__name__)

_RELABEL_PROMPT = """You are an expert at analyzing conversations.
Below is a transcript sample of a conversation between: {roles} (and possibly others).
The current speaker labels (like "A", "B") are generic.
Your task is to identify which speaker label corresponds to which role based on the dialogue context
(who asks the professional questions, who reports their situation).

TRANSCRIPT SAMPLE:
{sample}

INSTRUCTIONS:
1. Analyze the sample.
2. Return a JSON object mapping the original speaker labels to one of: {roles}.
3. If you are unsure, map a label to itself.
4. ONLY return the JSON. No preamble.

Example Output format:
{example}"""


def build_relabel_prompt(utterances: Sequence[Utterance], roles: Sequence[str], sample_size: int) -> str:
    """Prompt with the first sample_size utterances as 'speaker: text' lines."""
    sample = "\n".join(f"{u.speaker}: {u.text}" for u in utterances[:sample_size])
    symbols = sorted({u.speaker for u in utterances[:sample_size]})
    example = "{" + ", ".join(f'"{s}": "{r}"' for s, r in zip(symbols, roles)) + "}"
    return _RELABEL_PROMPT.format(roles=", ".join(roles), sample=sample, example=example)


def parse_speaker_mapping(payload: Any) -> dict[str, str]:
    """Keep only string -> non-empty string entries. Raises ValueError if payload is not an object."""
    if not isinstance(payload, dict):
        raise ValueError(f"Expected JSON object mapping, got {type(payload).__name__}")
    return {k: v for k, v in payload.items() if isinstance(k, str) and isinstance(v, str) and v.strip()}


def apply_speaker_mapping(utterances: Sequence[Utterance], mapping: Mapping[str, str]) -> list[Utterance]:
    """Replace speaker for symbols present in mapping; everything else untouched."""
    return [
        dataclasses.replace(u, speaker=mapping[u.speaker]) if mapping.get(u.speaker) else u
        for u in utterances
    ]


async def refine_speaker_labels(
    utterances: Sequence[Utterance],
    client: ChatCompletionClient | None = None,
    settings: Settings | None = None,
) -> list[Utterance]:
    """
    Ask the LLM for a symbol -> role mapping and apply it.
    Returns the original utterances on any failure or when relabeling is disabled.
    """
    original = list(utterances)
    if not original:
        return original

    settings = settings or (client.settings if client else get_settings())
    if not settings.RELABEL_ENABLED:
        return original
    client = client or ChatCompletionClient(settings)
    if not client.configured:
        logger.debug("LLM not configured; skipping speaker relabeling")
        return original

    prompt = build_relabel_prompt(
        original,
        split_roles(settings.RELABEL_ROLES),
        settings.RELABEL_SAMPLE_UTTERANCES,
    )
    try:
        mapping = parse_speaker_mapping(await client.complete_json(prompt))
    except Exception as e:
        logger.warning("Speaker relabeling failed: %s", e)
        return original

    logger.info("Speaker relabeling mapping: %s", mapping)
    return apply_speaker_mapping(original, mapping)
