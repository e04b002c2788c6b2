"""Tests for speaker label normalization."""

from __future__ import annotations

import pytest

from speakerline.diarization.labels import canonical_speaker, speaker_symbol, speaker_tag


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("SPEAKER_00", "A"),
        ("SPEAKER_01", "B"),
        ("SPEAKER_02", "C"),
        ("SPEAKER_7", "H"),
        ("SPEAKER_25", "Z"),
    ],
)
def test_canonical_speaker_maps_tag_index_to_letter(label: str, expected: str) -> None:
    """Tagged labels map 0 -> A, 1 -> B, ... regardless of zero padding."""
    assert canonical_speaker(label) == expected


def test_canonical_speaker_passes_through_untagged_labels() -> None:
    """Role labels and already-canonical symbols are left as they are."""
    assert canonical_speaker("Doctor") == "Doctor"
    assert canonical_speaker("A") == "A"
    assert canonical_speaker("speaker_00") == "speaker_00"


def test_decoder_tags_round_trip_to_symbols() -> None:
    """Labels built by speaker_tag canonicalize to the same letter as their index."""
    assert [canonical_speaker(speaker_tag(i)) for i in range(3)] == ["A", "B", "C"]
    assert speaker_tag(1) == "SPEAKER_01"


def test_speaker_symbol_continues_past_z_without_collisions() -> None:
    """Indices past 25 do not wrap onto A."""
    assert speaker_symbol(26) == "AA"
    assert speaker_symbol(27) == "AB"
    assert len({speaker_symbol(i) for i in range(100)}) == 100
