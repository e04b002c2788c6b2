"""
WAV decoding for the segmentation model: container bytes -> float32 mono @ 16kHz.

- PCM only (8-bit unsigned, 16/32-bit signed little-endian).
- Multi-channel input keeps the first (left) channel.
- Resampling is linear interpolation; good enough for segmentation, not for playback.
"""
from __future__ import annotations

import io
import logging
import wave

import numpy as np

logger = logging.getLogger(__name__)

TARGET_SAMPLE_RATE = 16000

# sample width (bytes) -> (dtype, offset, scale) for normalization to [-1, 1]
_PCM_FORMATS = {
    1: (np.uint8, 128.0, 128.0),
    2: (np.dtype("<i2"), 0.0, 32768.0),
    4: (np.dtype("<i4"), 0.0, 2147483648.0),
}


def decode_wav(data: bytes) -> tuple[np.ndarray, int]:
    """Decode WAV bytes to (float32 mono samples in [-1, 1], sample_rate). Raises ValueError on bad input."""
    try:
        with wave.open(io.BytesIO(data), "rb") as wav:
            channels = wav.getnchannels()
            sample_width = wav.getsampwidth()
            sample_rate = wav.getframerate()
            frames = wav.readframes(wav.getnframes())
    except (wave.Error, EOFError) as e:
        raise ValueError(f"Invalid WAV data: {e}") from e

    fmt = _PCM_FORMATS.get(sample_width)
    if fmt is None:
        raise ValueError(f"Unsupported WAV sample width: {sample_width * 8}-bit")
    dtype, offset, scale = fmt

    samples = np.frombuffer(frames, dtype=dtype)
    usable = len(samples) - len(samples) % channels
    samples = samples[:usable].reshape(-1, channels)[:, 0]
    audio = (samples.astype(np.float32) - offset) / scale
    return audio, sample_rate


def resample(audio: np.ndarray, src_rate: int, dst_rate: int) -> np.ndarray:
    """Linear-interpolation resample of a mono float32 signal."""
    if src_rate == dst_rate or len(audio) == 0:
        return audio.astype(np.float32, copy=False)
    if src_rate <= 0 or dst_rate <= 0:
        raise ValueError(f"Sample rates must be positive, got {src_rate} -> {dst_rate}")
    duration = len(audio) / src_rate
    dst_len = max(1, int(round(duration * dst_rate)))
    src_times = np.arange(len(audio)) / src_rate
    dst_times = np.arange(dst_len) / dst_rate
    return np.interp(dst_times, src_times, audio).astype(np.float32)


def load_wav_for_segmentation(data: bytes, target_rate: int = TARGET_SAMPLE_RATE) -> np.ndarray:
    """WAV bytes -> float32 mono at target_rate."""
    audio, sample_rate = decode_wav(data)
    if sample_rate != target_rate:
        logger.debug("Resampling audio %d Hz -> %d Hz", sample_rate, target_rate)
    return resample(audio, sample_rate, target_rate)
