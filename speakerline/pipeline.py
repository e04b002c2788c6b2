"""
Conversation pipeline: words + (segments | frame scores | audio) -> labeled utterances.

Segment source, first available wins:
  explicit segments -> decoded frame scores -> acoustic model on audio.
Strategy:
  acoustic  segments present: midpoint alignment + directional fill
  text      no segments, LLM configured and resegment_fallback: LLM turn splitting succeeded
  none      no segments, or LLM turn splitting skipped or failed: single default-speaker utterance
Role relabeling runs last when requested. Collaborator failures never propagate.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Optional, Sequence

import numpy as np

from speakerline.diarization.decoder import decode
from speakerline.diarization.models import FrameScores, SpeakerSegment
from speakerline.diarization.segmentation import FrameClassifier, diarize_audio
from speakerline.services.llm_client import ChatCompletionClient
from speakerline.services.relabel_service import refine_speaker_labels
from speakerline.services.resegment_service import resegment_words
from speakerline.transcript.aligner import align_words
from speakerline.transcript.models import Utterance, Word

logger = logging.getLogger(__name__)

Strategy = Literal["acoustic", "text", "none"]


@dataclass
class ConversationResult:
    utterances: list[Utterance]
    segments: list[SpeakerSegment] = field(default_factory=list)
    strategy: Strategy = "none"


async def resolve_segments(
    segments: Optional[Sequence[SpeakerSegment]] = None,
    scores: Optional[FrameScores] = None,
    total_duration_seconds: Optional[float] = None,
    audio: Optional[np.ndarray] = None,
    classifier: Optional[FrameClassifier] = None,
) -> list[SpeakerSegment]:
    """Pick the first available segment source. Returns [] when none is usable."""
    if segments is not None:
        return list(segments)
    if scores is not None:
        if total_duration_seconds is None:
            raise ValueError("total_duration_seconds is required with frame scores")
        return decode(scores, total_duration_seconds)
    if audio is not None:
        return await diarize_audio(audio, classifier)
    return []


async def build_conversation(
    words: Sequence[Word],
    segments: Optional[Sequence[SpeakerSegment]] = None,
    *,
    scores: Optional[FrameScores] = None,
    total_duration_seconds: Optional[float] = None,
    audio: Optional[np.ndarray] = None,
    classifier: Optional[FrameClassifier] = None,
    llm_client: Optional[ChatCompletionClient] = None,
    refine_roles: bool = False,
    resegment_fallback: bool = False,
) -> ConversationResult:
    """
    Build the speaker-labeled conversation for one finished recording.
    Raises ValueError only for malformed frame scores.
    """
    resolved = await resolve_segments(segments, scores, total_duration_seconds, audio, classifier)
    llm_ready = llm_client is not None and llm_client.configured

    text_utterances = None
    if not resolved and resegment_fallback and llm_ready:
        text_utterances = await resegment_words(words, client=llm_client)

    if resolved:
        utterances = align_words(words, resolved)
        strategy: Strategy = "acoustic"
    elif text_utterances is not None:
        utterances = text_utterances
        strategy = "text"
    else:
        utterances = align_words(words, [])
        strategy = "none"

    if refine_roles and llm_ready and utterances:
        utterances = await refine_speaker_labels(utterances, client=llm_client)

    logger.info(
        "Conversation built: %d words -> %d utterances (strategy=%s, segments=%d)",
        len(words), len(utterances), strategy, len(resolved),
    )
    return ConversationResult(utterances=utterances, segments=resolved, strategy=strategy)
