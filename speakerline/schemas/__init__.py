"""Pydantic schemas for API request/response."""
from speakerline.schemas.diarize import (
    AlignRequest,
    DecodeRequest,
    DecodeResponse,
    SegmentIn,
    SegmentOut,
    TranscriptRequest,
    TranscriptResponse,
    UtteranceOut,
    UtterancesResponse,
    WordIn,
)

__all__ = [
    "AlignRequest",
    "DecodeRequest",
    "DecodeResponse",
    "SegmentIn",
    "SegmentOut",
    "TranscriptRequest",
    "TranscriptResponse",
    "UtteranceOut",
    "UtterancesResponse",
    "WordIn",
]
