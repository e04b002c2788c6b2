"""
Schemas for the diarization API.

Times in responses are milliseconds. Word inputs accept heterogeneous time values
(number = ms, "12.3s", numeric string = ms, {seconds, nanos}) and either
text/start/end or Google-style word/startTime/endTime keys.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from speakerline.diarization.models import FrameScores, SpeakerSegment
from speakerline.transcript.models import Utterance, Word


class WordIn(BaseModel):
    """One STT word. start/end are raw TimeValues, normalized by the aligner."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., alias="word", description="Word text")
    start: Any = Field(None, alias="startTime", description="Start time (any TimeValue variant)")
    end: Any = Field(None, alias="endTime", description="End time (any TimeValue variant)")

    def to_word(self) -> Word:
        return Word(text=self.text, start=self.start, end=self.end)


class SegmentIn(BaseModel):
    """Speaker-active interval; labels like SPEAKER_00 are canonicalized to A, B, ..."""

    speaker: str
    start: float = Field(..., allow_inf_nan=False, description="Start in ms")
    end: float = Field(..., allow_inf_nan=False, description="End in ms")

    def to_segment(self) -> SpeakerSegment:
        return SpeakerSegment(speaker=self.speaker, start_ms=self.start, end_ms=self.end)


class SegmentOut(BaseModel):
    speaker: str
    start: float
    end: float

    @classmethod
    def from_segment(cls, seg: SpeakerSegment) -> "SegmentOut":
        return cls(speaker=seg.speaker, start=seg.start_ms, end=seg.end_ms)


class UtteranceOut(BaseModel):
    speaker: str
    text: str
    start: float
    end: float

    @classmethod
    def from_utterance(cls, utt: Utterance) -> "UtteranceOut":
        return cls(**utt.to_dict())


class DecodeRequest(BaseModel):
    """Request body for POST /api/diarize/decode: flat frame-major powerset scores."""

    scores: list[float] = Field(..., description="Flat buffer, length frame_count * class_count")
    frame_count: int = Field(..., ge=0)
    class_count: int = Field(..., ge=1, description="Powerset size, e.g. 7 for 3 speakers")
    total_duration_seconds: float = Field(..., ge=0.0, allow_inf_nan=False)

    def to_frame_scores(self) -> FrameScores:
        return FrameScores(data=self.scores, frame_count=self.frame_count, class_count=self.class_count)


class DecodeResponse(BaseModel):
    segments: list[SegmentOut]


class AlignRequest(BaseModel):
    """Request body for POST /api/diarize/align."""

    words: list[WordIn] = Field(default_factory=list)
    segments: list[SegmentIn] = Field(default_factory=list, description="Empty = single default-speaker utterance")


class TranscriptRequest(BaseModel):
    """Request body for POST /api/transcript (full pipeline)."""

    words: list[WordIn] = Field(default_factory=list)
    segments: list[SegmentIn] | None = Field(None, description="Precomputed speaker segments")
    frame_scores: DecodeRequest | None = Field(None, description="Raw powerset scores (decoded when segments absent)")
    refine_roles: bool = Field(False, description="Map A/B to roles via LLM (fail-soft)")
    resegment_fallback: bool = Field(False, description="Split by LLM when no acoustic segments (fail-soft)")


class UtterancesResponse(BaseModel):
    utterances: list[UtteranceOut]


class TranscriptResponse(BaseModel):
    utterances: list[UtteranceOut]
    segments: list[SegmentOut] = Field(default_factory=list)
    strategy: Literal["acoustic", "text", "none"] = "none"
