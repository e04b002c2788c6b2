"""Tests for realigning text-only speaker turns onto word timestamps."""

from __future__ import annotations

from speakerline.transcript.models import Utterance, Word
from speakerline.transcript.resegment import TextSegment, realign_text_segments


def test_realign_consumes_words_by_count(words: list[Word]) -> None:
    segments = [
        TextSegment("Patient", "hello doctor"),
        TextSegment("Doctor", "hi how are you"),
    ]

    utterances = realign_text_segments(words, segments)

    assert utterances == [
        Utterance("Patient", "hello doctor", 0.0, 900.0),
        Utterance("Doctor", "hi how are you", 1500.0, 2400.0),
    ]


def test_realign_skips_blank_segments_and_canonicalizes_tags(words: list[Word]) -> None:
    segments = [
        TextSegment("SPEAKER_01", "hello"),
        TextSegment("Doctor", "   "),
        TextSegment("SPEAKER_00", "doctor hi how are you"),
    ]

    utterances = realign_text_segments(words, segments)

    assert [(u.speaker, u.start_ms, u.end_ms) for u in utterances] == [
        ("B", 0.0, 400.0),
        ("A", 400.0, 2400.0),
    ]


def test_realign_stops_when_words_run_out(words: list[Word]) -> None:
    """Extra segments beyond the word list are dropped; the partial result is returned."""
    segments = [
        TextSegment("Doctor", "hello doctor hi how"),
        TextSegment("Patient", "are you today my friend"),
        TextSegment("Doctor", "never reached"),
    ]

    utterances = realign_text_segments(words, segments)

    assert len(utterances) == 2
    # end clamps to the last available word
    assert utterances[1].start_ms == 1900.0
    assert utterances[1].end_ms == 2400.0


def test_realign_empty_inputs(words: list[Word]) -> None:
    assert realign_text_segments([], [TextSegment("Doctor", "hi")]) == []
    assert realign_text_segments(words, []) == []
