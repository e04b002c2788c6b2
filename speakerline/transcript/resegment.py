"""
Timestamp realignment for text-only speaker segmentation.

When acoustic segments are unavailable, an external text segmenter returns
[{speaker, text}, ...] whose texts are expected to reproduce the transcript word
for word. Timestamps are recovered by consuming the original words in order,
len(text.split()) at a time. No drift detection: if the segmenter added or
dropped words, boundaries shift accordingly.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from speakerline.diarization.labels import canonical_speaker
from speakerline.transcript.models import Utterance, Word


@dataclass
class TextSegment:
    """One speaker-labeled span of transcript text (no timestamps)."""

    speaker: str
    text: str


def realign_text_segments(words: Sequence[Word], segments: Sequence[TextSegment]) -> list[Utterance]:
    """
    Assign start/end to each text segment from the original word timeline.
    Stops (returning what was built) when words run out; never raises.
    """
    utterances: list[Utterance] = []
    word_index = 0

    for segment in segments:
        tokens = segment.text.split()
        if not tokens:
            continue
        if word_index >= len(words):
            break

        start = words[word_index].start_ms
        word_index += len(tokens)
        end = words[min(word_index, len(words)) - 1].end_ms

        utterances.append(
            Utterance(
                speaker=canonical_speaker(segment.speaker),
                text=segment.text,
                start_ms=start,
                end_ms=end,
            )
        )

    return utterances
