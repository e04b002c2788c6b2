"""
FastAPI app: speaker diarization decoding and transcript alignment.

HTTP API:
- POST /api/diarize/decode   flat powerset scores -> speaker segments
- POST /api/diarize/align    words + segments -> speaker-labeled utterances
- POST /api/diarize/audio    WAV body -> speaker segments (needs segmentation model)
- POST /api/transcript       full pipeline (segments | scores, optional LLM relabel/resegment)

Times in responses are milliseconds.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Literal

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from speakerline.audio.wav import load_wav_for_segmentation
from speakerline.config import Settings, get_settings
from speakerline.diarization.decoder import decode
from speakerline.diarization.segmentation import (
    FrameClassifier,
    OnnxFrameClassifier,
    diarize_audio,
    load_onnx_session,
)
from speakerline.pipeline import build_conversation
from speakerline.schemas.diarize import (
    AlignRequest,
    DecodeRequest,
    DecodeResponse,
    SegmentOut,
    TranscriptRequest,
    TranscriptResponse,
    UtteranceOut,
    UtterancesResponse,
)
from speakerline.services.llm_client import ChatCompletionClient
from speakerline.transcript.aligner import align_words
from speakerline.transcript.writer import render_transcript

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Apply LOG_LEVEL to the package logger; add a file handler when LOG_FILE is set."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    package_logger = logging.getLogger("speakerline")
    package_logger.setLevel(level)
    if settings.LOG_FILE:
        log_path = os.path.abspath(settings.LOG_FILE)
        already = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == log_path
            for h in package_logger.handlers
        )
        if not already:
            log_dir = os.path.dirname(log_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handler = logging.FileHandler(log_path, encoding="utf-8")
            handler.setFormatter(logging.Formatter(_LOG_FORMAT))
            package_logger.addHandler(handler)


def _load_frame_classifier(settings: Settings) -> FrameClassifier | None:
    """Load segmentation model once at startup. None when disabled or not configured."""
    if not settings.DIARIZATION_ENABLED or not settings.SEGMENTATION_MODEL_PATH:
        return None
    session = load_onnx_session(settings.SEGMENTATION_MODEL_PATH)
    return OnnxFrameClassifier(session, sample_rate=settings.SAMPLE_RATE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings)
    # Model session and LLM client are owned by the app and injected per request
    app.state.frame_classifier = _load_frame_classifier(settings)
    app.state.llm_client = ChatCompletionClient(settings)
    yield
    app.state.frame_classifier = None
    app.state.llm_client = None


app = FastAPI(
    title="Speaker Diarization",
    description="Powerset frame decoding and word/speaker alignment",
    lifespan=lifespan,
)


def _classifier(request: Request) -> FrameClassifier | None:
    return getattr(request.app.state, "frame_classifier", None)


def _llm_client(request: Request) -> ChatCompletionClient | None:
    return getattr(request.app.state, "llm_client", None)


@app.get("/health")
async def health(request: Request) -> dict:
    client = _llm_client(request)
    return {
        "status": "ok",
        "segmentation_model": _classifier(request) is not None,
        "llm": bool(client and client.configured),
    }


@app.post("/api/diarize/decode", response_model=DecodeResponse)
def decode_scores(request: DecodeRequest) -> DecodeResponse:
    """Flat frame-major powerset scores -> non-overlapping speaker segments."""
    try:
        segments = decode(request.to_frame_scores(), request.total_duration_seconds)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return DecodeResponse(segments=[SegmentOut.from_segment(s) for s in segments])


@app.post("/api/diarize/align", response_model=UtterancesResponse)
async def align(request: AlignRequest) -> UtterancesResponse:
    """Words + segments -> speaker-labeled utterances (lossless partition of words)."""
    utterances = align_words(
        [w.to_word() for w in request.words],
        [s.to_segment() for s in request.segments],
    )
    return UtterancesResponse(utterances=[UtteranceOut.from_utterance(u) for u in utterances])


@app.post("/api/diarize/audio", response_model=DecodeResponse)
async def diarize_wav(request: Request) -> DecodeResponse:
    """
    Raw WAV body -> speaker segments via the segmentation model.
    503 when no model is loaded; 400 for unreadable audio.
    """
    classifier = _classifier(request)
    if classifier is None:
        raise HTTPException(status_code=503, detail="Segmentation model not loaded (set SEGMENTATION_MODEL_PATH)")
    body = await request.body()
    try:
        audio = load_wav_for_segmentation(body, classifier.sample_rate)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    segments = await diarize_audio(audio, classifier)
    return DecodeResponse(segments=[SegmentOut.from_segment(s) for s in segments])


@app.post("/api/transcript", response_model=TranscriptResponse)
async def transcript(
    request: Request,
    body: TranscriptRequest,
    fmt: Literal["json", "text"] = Query("json", alias="format"),
):
    """
    Full pipeline. Segment source: segments, else frame_scores, else none.
    LLM steps are optional and fail-soft. format=text returns one line per utterance.
    """
    scores = body.frame_scores
    try:
        result = await build_conversation(
            [w.to_word() for w in body.words],
            [s.to_segment() for s in body.segments] if body.segments is not None else None,
            scores=scores.to_frame_scores() if scores is not None else None,
            total_duration_seconds=scores.total_duration_seconds if scores is not None else None,
            llm_client=_llm_client(request),
            refine_roles=body.refine_roles,
            resegment_fallback=body.resegment_fallback,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Transcript pipeline failed: %s", e)
        raise HTTPException(status_code=502, detail="Transcript pipeline failed")

    if fmt == "text":
        settings = get_settings()
        return PlainTextResponse(
            render_transcript(result.utterances, "text", settings.TRANSCRIPT_ADD_TIMESTAMPS)
        )
    return TranscriptResponse(
        utterances=[UtteranceOut.from_utterance(u) for u in result.utterances],
        segments=[SegmentOut.from_segment(s) for s in result.segments],
        strategy=result.strategy,
    )
