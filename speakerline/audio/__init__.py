"""Audio input: WAV decoding and resampling for the segmentation model."""
from .wav import TARGET_SAMPLE_RATE, decode_wav, load_wav_for_segmentation, resample

__all__ = [
    "TARGET_SAMPLE_RATE",
    "decode_wav",
    "load_wav_for_segmentation",
    "resample",
]
