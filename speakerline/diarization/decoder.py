"""
Frame classification decoder: powerset scores -> ordered speaker segments.

Powerset encoding for K solo speakers (class_count = 1 + K + K*(K-1)/2):
- 0: silence
- 1..K: solo speaker 0..K-1
- K+1..: each unordered pair (i, j), i < j, in lexicographic order

For K=3 (pyannote-segmentation-3.0): 0 silence, 1 A, 2 B, 3 C, 4 A+B, 5 A+C, 6 B+C.

Overlap classes are attributed to the first (lowest-indexed) speaker of the pair.
Simultaneous speech is collapsed to one speaker on purpose; output segments never overlap.
"""
from __future__ import annotations

import logging
import math
from itertools import combinations
from typing import Sequence

import numpy as np

from speakerline.diarization.labels import speaker_tag
from speakerline.diarization.models import FrameScores, SpeakerSegment

logger = logging.getLogger(__name__)


def powerset_class_count(num_speakers: int) -> int:
    """Number of powerset classes (silence + solos + pairs) for num_speakers."""
    if num_speakers < 0:
        raise ValueError(f"num_speakers must be >= 0, got {num_speakers}")
    return 1 + num_speakers + num_speakers * (num_speakers - 1) // 2


def speakers_for_class_count(class_count: int) -> int:
    """Inverse of powerset_class_count. Raises ValueError if class_count is not a powerset size."""
    if class_count >= 1:
        # class_count - 1 = k * (k + 1) / 2
        k = (math.isqrt(8 * (class_count - 1) + 1) - 1) // 2
        if powerset_class_count(k) == class_count:
            return k
    raise ValueError(f"class_count={class_count} is not a valid powerset size (1, 2, 4, 7, 11, ...)")


def attributed_speaker(class_index: int, num_speakers: int) -> int | None:
    """Solo speaker index a single class is attributed to (None = silence), without building the table."""
    if class_index == 0:
        return None
    if class_index <= num_speakers:
        return class_index - 1
    pair = class_index - num_speakers - 1
    for first in range(num_speakers):
        span = num_speakers - 1 - first
        if pair < span:
            return first
        pair -= span
    raise ValueError(f"class index {class_index} out of range for {num_speakers} speakers")


def powerset_speaker_indices(class_count: int) -> list[int | None]:
    """Class index -> solo speaker index it is attributed to (None = silence)."""
    k = speakers_for_class_count(class_count)
    table: list[int | None] = [None]
    table.extend(range(k))
    # Overlap pair -> first speaker of the pair
    table.extend(first for first, _ in combinations(range(k), 2))
    return table


def powerset_labels(class_count: int) -> list[str | None]:
    """Class index -> raw speaker label (None = silence)."""
    return [None if idx is None else speaker_tag(idx) for idx in powerset_speaker_indices(class_count)]


def _frame_winners(scores: Sequence[float] | np.ndarray, frame_count: int, class_count: int) -> np.ndarray:
    """Per-frame argmax; first maximum wins on ties. NaN scores never win."""
    flat = np.asarray(scores, dtype=np.float64).reshape(-1)
    expected = frame_count * class_count
    if flat.size != expected:
        raise ValueError(
            f"Score buffer has {flat.size} values, expected frame_count*class_count = {expected}"
        )
    matrix = flat.reshape(frame_count, class_count)
    matrix = np.where(np.isnan(matrix), -np.inf, matrix)
    return matrix.argmax(axis=1)


def decode_frame_scores(
    scores: Sequence[float] | np.ndarray,
    frame_count: int,
    class_count: int,
    total_duration_seconds: float,
) -> list[SpeakerSegment]:
    """
    Convert a flat frame-major score buffer into non-overlapping speaker segments.

    - Each frame takes its argmax class; ties resolve to the lowest class index.
    - Consecutive frames with the same speaker form one segment; silence frames emit nothing.
    - Boundaries: frame_index * seconds_per_frame * 1000 (end = first frame after the run).
    Returns [] for zero frames or all-silence input. Raises ValueError only for malformed shapes.
    """
    if frame_count < 0:
        raise ValueError(f"frame_count must be >= 0, got {frame_count}")
    num_speakers = speakers_for_class_count(class_count)
    winners = _frame_winners(scores, frame_count, class_count)
    if frame_count == 0:
        return []
    labels: dict[int, str | None] = {}
    for class_idx in np.unique(winners).tolist():
        idx = attributed_speaker(class_idx, num_speakers)
        labels[class_idx] = None if idx is None else speaker_tag(idx)

    seconds_per_frame = total_duration_seconds / frame_count

    segments: list[SpeakerSegment] = []
    current: str | None = None
    start_frame = 0
    for i, class_idx in enumerate(winners):
        speaker = labels[int(class_idx)]
        if speaker != current:
            if current is not None:
                segments.append(
                    SpeakerSegment(
                        speaker=current,
                        start_ms=start_frame * seconds_per_frame * 1000,
                        end_ms=i * seconds_per_frame * 1000,
                    )
                )
            current = speaker
            start_frame = i

    if current is not None:
        segments.append(
            SpeakerSegment(
                speaker=current,
                start_ms=start_frame * seconds_per_frame * 1000,
                end_ms=frame_count * seconds_per_frame * 1000,
            )
        )

    logger.debug("Decoded %d frames into %d segments", frame_count, len(segments))
    return segments


def decode(frame_scores: FrameScores, total_duration_seconds: float) -> list[SpeakerSegment]:
    """decode_frame_scores for a FrameScores bundle."""
    return decode_frame_scores(
        frame_scores.data,
        frame_scores.frame_count,
        frame_scores.class_count,
        total_duration_seconds,
    )
