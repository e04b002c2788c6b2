"""
Word/segment aligner: STT words + speaker segments -> speaker-labeled utterances.

Guarantees:
- Output is a lossless, order-preserving partition of the input words.
- No word is left without a speaker; unmatched words are filled from neighbours,
  and DEFAULT_SPEAKER is used only when nothing matched at all.
- Never raises; pure and re-entrant.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from speakerline.diarization.labels import canonical_speaker
from speakerline.diarization.models import SpeakerSegment
from speakerline.transcript.models import Utterance, Word

DEFAULT_SPEAKER = "A"


@dataclass
class _LabeledWord:
    text: str
    start_ms: float
    end_ms: float
    speaker: Optional[str]  # None = unmatched


def _match_speaker(midpoint: float, segments: Sequence[SpeakerSegment]) -> Optional[str]:
    """First segment whose inclusive [start, end] contains midpoint."""
    for seg in segments:
        if seg.contains(midpoint):
            return canonical_speaker(seg.speaker)
    return None


def _fill_gaps(labeled: list[_LabeledWord]) -> None:
    """Forward fill, then backward fill, then default. Mutates in place."""
    for i in range(1, len(labeled)):
        if labeled[i].speaker is None and labeled[i - 1].speaker is not None:
            labeled[i].speaker = labeled[i - 1].speaker

    for i in range(len(labeled) - 2, -1, -1):
        if labeled[i].speaker is None and labeled[i + 1].speaker is not None:
            labeled[i].speaker = labeled[i + 1].speaker

    for lw in labeled:
        if lw.speaker is None:
            lw.speaker = DEFAULT_SPEAKER


def _collapse(labeled: list[_LabeledWord]) -> list[Utterance]:
    """Group maximal same-speaker runs into utterances."""
    utterances: list[Utterance] = []
    run: list[_LabeledWord] = []
    for lw in labeled:
        if run and lw.speaker != run[0].speaker:
            utterances.append(_utterance_from_run(run))
            run = []
        run.append(lw)
    if run:
        utterances.append(_utterance_from_run(run))
    return utterances


def _utterance_from_run(run: list[_LabeledWord]) -> Utterance:
    return Utterance(
        speaker=run[0].speaker or DEFAULT_SPEAKER,
        text=" ".join(lw.text for lw in run),
        start_ms=run[0].start_ms,
        end_ms=run[-1].end_ms,
    )


def align_words(words: Sequence[Word], segments: Sequence[SpeakerSegment]) -> list[Utterance]:
    """
    Assign each word the speaker whose segment contains its midpoint, resolve
    unmatched words by directional fill, and collapse into utterances.

    Empty segments: one DEFAULT_SPEAKER utterance spanning all words.
    """
    if not words:
        return []

    if not segments:
        return [
            Utterance(
                speaker=DEFAULT_SPEAKER,
                text=" ".join(w.text for w in words),
                start_ms=words[0].start_ms,
                end_ms=words[-1].end_ms,
            )
        ]

    labeled: list[_LabeledWord] = []
    for word in words:
        start = word.start_ms
        end = word.end_ms
        labeled.append(
            _LabeledWord(
                text=word.text,
                start_ms=start,
                end_ms=end,
                speaker=_match_speaker((start + end) / 2, segments),
            )
        )

    _fill_gaps(labeled)
    return _collapse(labeled)
