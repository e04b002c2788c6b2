"""
Segment and score structures for acoustic diarization.

- SpeakerSegment: one contiguous speaker-active interval (milliseconds).
  Silence is never a segment; it is the gap between segments.
- FrameScores: flat frame-major buffer of per-class scores from the
  segmentation model, shape [frame_count, class_count].
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np


@dataclass
class SpeakerSegment:
    """
    One speaker-active interval.

    speaker: raw label (e.g. "SPEAKER_00") or any label using the same convention.
    start_ms, end_ms: milliseconds, start_ms <= end_ms.
    """

    speaker: str
    start_ms: float
    end_ms: float

    @property
    def duration_ms(self) -> float:
        return self.end_ms - self.start_ms

    def contains(self, t_ms: float) -> bool:
        """Inclusive on both ends."""
        return self.start_ms <= t_ms <= self.end_ms

    def to_dict(self) -> dict[str, Any]:
        return {"speaker": self.speaker, "start": self.start_ms, "end": self.end_ms}


@dataclass
class FrameScores:
    """Flat frame-major score buffer plus its logical shape."""

    data: Sequence[float] | np.ndarray
    frame_count: int
    class_count: int

    @classmethod
    def from_logits(cls, logits: Any) -> "FrameScores":
        """
        Build from model output of shape [frames, classes] or [1, frames, classes].
        """
        arr = np.asarray(logits, dtype=np.float32)
        if arr.ndim == 3:
            if arr.shape[0] != 1:
                raise ValueError(f"Expected batch size 1, got logits shape {arr.shape}")
            arr = arr[0]
        if arr.ndim != 2:
            raise ValueError(f"Expected 2-D or 3-D logits, got shape {arr.shape}")
        frames, classes = arr.shape
        return cls(data=arr.reshape(-1), frame_count=int(frames), class_count=int(classes))
