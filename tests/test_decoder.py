"""Tests for powerset frame-score decoding."""

from __future__ import annotations

import numpy as np
import pytest

from speakerline.diarization.decoder import (
    attributed_speaker,
    decode,
    decode_frame_scores,
    powerset_class_count,
    powerset_labels,
    powerset_speaker_indices,
    speakers_for_class_count,
)
from speakerline.diarization.models import FrameScores, SpeakerSegment


def one_hot_frames(classes: list[int], class_count: int = 7) -> list[float]:
    """Flat frame-major buffer where each frame's winning class scores 1.0."""
    flat: list[float] = []
    for winner in classes:
        row = [0.0] * class_count
        row[winner] = 1.0
        flat.extend(row)
    return flat


def test_powerset_table_for_three_speakers() -> None:
    """7 classes: silence, 3 solos, then pairs attributed to their first speaker."""
    assert powerset_class_count(3) == 7
    assert speakers_for_class_count(7) == 3
    assert powerset_labels(7) == [
        None,
        "SPEAKER_00",
        "SPEAKER_01",
        "SPEAKER_02",
        "SPEAKER_00",  # A+B
        "SPEAKER_00",  # A+C
        "SPEAKER_01",  # B+C
    ]


@pytest.mark.parametrize("class_count", [0, 3, 5, 6, 8])
def test_invalid_powerset_size_raises(class_count: int) -> None:
    with pytest.raises(ValueError):
        powerset_labels(class_count)


def test_decode_concrete_scenario_with_silence_gap() -> None:
    """Frames [1, 1, 0, 2] over 4 s -> two segments with a 1 s silence gap."""
    segments = decode_frame_scores(one_hot_frames([1, 1, 0, 2]), 4, 7, 4.0)

    assert segments == [
        SpeakerSegment("SPEAKER_00", 0.0, 2000.0),
        SpeakerSegment("SPEAKER_01", 3000.0, 4000.0),
    ]


def test_decode_tie_resolves_to_lowest_class_index() -> None:
    """Equal top scores pick the first maximum."""
    frame = [0.1, 0.2, 0.9, 0.9, 0.0, 0.0, 0.0]
    segments = decode_frame_scores(frame, 1, 7, 1.0)

    assert segments == [SpeakerSegment("SPEAKER_01", 0.0, 1000.0)]


def test_decode_tie_with_silence_is_silence() -> None:
    frame = [0.5, 0.5, 0.0, 0.0, 0.0, 0.0, 0.0]
    assert decode_frame_scores(frame, 1, 7, 1.0) == []


@pytest.mark.parametrize(("overlap_class", "expected"), [(4, "SPEAKER_00"), (5, "SPEAKER_00"), (6, "SPEAKER_01")])
def test_decode_overlap_attributes_first_speaker_of_pair(overlap_class: int, expected: str) -> None:
    """Overlap frames produce exactly one segment for the pair's first speaker."""
    segments = decode_frame_scores(one_hot_frames([overlap_class]), 1, 7, 0.5)

    assert segments == [SpeakerSegment(expected, 0.0, 500.0)]


def test_decode_overlap_merges_with_adjacent_solo_run() -> None:
    """A solo frame followed by its own overlap class is one continuous run."""
    segments = decode_frame_scores(one_hot_frames([1, 4, 4, 2]), 4, 7, 2.0)

    assert segments == [
        SpeakerSegment("SPEAKER_00", 0.0, 1500.0),
        SpeakerSegment("SPEAKER_01", 1500.0, 2000.0),
    ]


def test_decode_zero_frames_and_all_silence_are_empty() -> None:
    assert decode_frame_scores([], 0, 7, 0.0) == []
    assert decode_frame_scores(one_hot_frames([0, 0, 0]), 3, 7, 3.0) == []


def test_decode_buffer_size_mismatch_raises() -> None:
    with pytest.raises(ValueError):
        decode_frame_scores([0.0] * 13, 2, 7, 1.0)


def test_decode_nan_scores_never_win() -> None:
    frame = [float("nan"), 0.1, 0.3, float("nan"), 0.0, 0.0, 0.0]
    assert decode_frame_scores(frame, 1, 7, 1.0) == [SpeakerSegment("SPEAKER_01", 0.0, 1000.0)]


def test_decode_segments_are_ordered_non_overlapping_and_bounded() -> None:
    """Random scores: ordered, disjoint, and total duration never exceeds the audio."""
    rng = np.random.default_rng(7)
    frame_count, duration = 293, 17.3
    scores = rng.normal(size=frame_count * 7)

    segments = decode_frame_scores(scores, frame_count, 7, duration)

    assert segments
    for prev, cur in zip(segments, segments[1:]):
        assert prev.end_ms <= cur.start_ms
        assert prev.start_ms <= cur.start_ms
    assert all(s.start_ms <= s.end_ms for s in segments)
    assert sum(s.duration_ms for s in segments) <= duration * 1000 + 1e-6


def test_decode_full_coverage_when_no_frame_is_silent() -> None:
    segments = decode_frame_scores(one_hot_frames([1, 2, 3, 6, 1]), 5, 7, 2.5)

    assert sum(s.duration_ms for s in segments) == pytest.approx(2500.0)
    assert segments[0].start_ms == 0.0
    assert segments[-1].end_ms == pytest.approx(2500.0)


def test_decode_from_model_logits_shape() -> None:
    """[1, frames, classes] logits decode the same as the flat buffer."""
    logits = np.array(one_hot_frames([1, 1, 0, 2]), dtype=np.float32).reshape(1, 4, 7)

    scores = FrameScores.from_logits(logits)

    assert (scores.frame_count, scores.class_count) == (4, 7)
    assert decode(scores, 4.0) == decode_frame_scores(one_hot_frames([1, 1, 0, 2]), 4, 7, 4.0)


def test_decode_two_speaker_powerset() -> None:
    """4 classes: silence, A, B, A+B."""
    segments = decode_frame_scores(one_hot_frames([3, 2, 2], class_count=4), 3, 4, 3.0)

    assert segments == [
        SpeakerSegment("SPEAKER_00", 0.0, 1000.0),
        SpeakerSegment("SPEAKER_01", 1000.0, 3000.0),
    ]


def test_zero_frames_with_huge_class_count_returns_empty() -> None:
    """Large but valid powerset sizes are validated without building the class table."""
    assert speakers_for_class_count(powerset_class_count(4000)) == 4000
    assert decode_frame_scores([], 0, powerset_class_count(4000), 1.0) == []


@pytest.mark.parametrize("num_speakers", [0, 1, 2, 3, 4, 7])
def test_attributed_speaker_matches_powerset_table(num_speakers: int) -> None:
    table = powerset_speaker_indices(powerset_class_count(num_speakers))

    assert [attributed_speaker(c, num_speakers) for c in range(len(table))] == table


def test_decode_pair_class_for_many_speakers() -> None:
    """Only winning classes are resolved; the last pair (K-2, K-1) maps to speaker K-2."""
    num_speakers = 50
    class_count = powerset_class_count(num_speakers)
    scores = np.zeros((2, class_count))
    scores[0, class_count - 1] = 1.0
    scores[1, num_speakers + 1] = 1.0  # pair (0, 1)

    segments = decode_frame_scores(scores.reshape(-1), 2, class_count, 2.0)

    assert segments == [
        SpeakerSegment("SPEAKER_48", 0.0, 1000.0),
        SpeakerSegment("SPEAKER_00", 1000.0, 2000.0),
    ]
