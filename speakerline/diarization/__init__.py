"""
Acoustic diarization: powerset frame scores -> speaker segments.

- Decoder is pure and total: argmax per frame, run-length encoding, silence = gap.
- Labels: decoder emits SPEAKER_00, SPEAKER_01, ...; canonical_speaker maps them to A, B, ...
- Overlap classes are attributed to the first speaker of the pair (no multi-label output).

Limitations:
- Overlapping speech is collapsed to a single speaker.
- Speaker labels are session-local; no real identity inference.
"""
from __future__ import annotations

from speakerline.diarization.decoder import decode, decode_frame_scores, powerset_class_count, powerset_labels
from speakerline.diarization.labels import canonical_speaker, speaker_tag
from speakerline.diarization.models import FrameScores, SpeakerSegment
from speakerline.diarization.segmentation import FrameClassifier, OnnxFrameClassifier, diarize_audio

__all__ = [
    "FrameClassifier",
    "FrameScores",
    "OnnxFrameClassifier",
    "SpeakerSegment",
    "canonical_speaker",
    "decode",
    "decode_frame_scores",
    "diarize_audio",
    "powerset_class_count",
    "powerset_labels",
    "speaker_tag",
]
