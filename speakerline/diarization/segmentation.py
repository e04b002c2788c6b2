"""
FrameClassifier: acoustic segmentation model producing powerset frame scores.

The model session is created ONCE by the caller (app lifespan) and injected here;
nothing in this module holds a process-wide model. Inference is blocking, so
diarize_audio() runs it in the default executor.

Failures (missing model, bad input, runtime errors) are absorbed in diarize_audio():
callers get [] ("no acoustic information") and fall back to text-only handling.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from speakerline.diarization.decoder import decode
from speakerline.diarization.models import FrameScores, SpeakerSegment

logger = logging.getLogger(__name__)

# Type for shared onnxruntime.InferenceSession (loaded at startup)
InferenceSessionT = Any

DEFAULT_SAMPLE_RATE = 16000


class FrameClassifier(ABC):
    """
    Abstract frame classifier. Accepts float32 mono audio (normalized [-1, 1])
    at sample_rate and returns one score per powerset class per frame.
    """

    @abstractmethod
    def classify(self, audio: np.ndarray) -> FrameScores:
        """Blocking inference; run from executor."""
        ...

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """Expected sample rate (e.g. 16000)."""
        ...


class OnnxFrameClassifier(FrameClassifier):
    """
    Segmentation model via onnxruntime (e.g. onnx-community/pyannote-segmentation-3.0).
    Input: [1, 1, samples] float32. Output logits: [1, frames, classes].
    """

    def __init__(self, session: InferenceSessionT, sample_rate: int = DEFAULT_SAMPLE_RATE) -> None:
        """session: shared InferenceSession owned by the caller."""
        self._session = session
        self._sample_rate = sample_rate
        self._input_name = session.get_inputs()[0].name

    def classify(self, audio: np.ndarray) -> FrameScores:
        samples = np.asarray(audio, dtype=np.float32).reshape(1, 1, -1)
        outputs = self._session.run(None, {self._input_name: samples})
        return FrameScores.from_logits(outputs[0])

    @property
    def sample_rate(self) -> int:
        return self._sample_rate


def load_onnx_session(model_path: str) -> InferenceSessionT:
    """Load segmentation model once. Called at startup when SEGMENTATION_MODEL_PATH is set."""
    try:
        import onnxruntime as ort
    except ImportError as err:
        raise ImportError(
            "onnxruntime is required for acoustic segmentation. "
            "Install with: pip install speakerline[onnx]"
        ) from err
    logger.info("Loading segmentation model from %s", model_path)
    return ort.InferenceSession(model_path, providers=["CPUExecutionProvider"])


def _diarize_sync(audio: np.ndarray, classifier: FrameClassifier) -> list[SpeakerSegment]:
    scores = classifier.classify(audio)
    total_duration = len(audio) / classifier.sample_rate
    return decode(scores, total_duration)


async def diarize_audio(audio: np.ndarray, classifier: FrameClassifier | None) -> list[SpeakerSegment]:
    """
    Run segmentation + decoding for one finished recording.
    Returns [] when no classifier is available or on any failure.
    """
    if classifier is None:
        logger.debug("No segmentation model available; skipping acoustic diarization")
        return []
    if len(audio) == 0:
        return []
    loop = asyncio.get_running_loop()
    try:
        segments = await loop.run_in_executor(None, _diarize_sync, audio, classifier)
    except Exception as e:
        logger.warning("Acoustic diarization failed: %s", e)
        return []
    logger.info("Acoustic diarization complete: %d segments", len(segments))
    return segments
