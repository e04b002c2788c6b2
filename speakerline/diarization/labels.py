"""
Speaker label normalization: raw class indices / tagged labels -> canonical symbols.

Single source of truth for speaker identifiers across the pipeline:
- decoder emits raw tagged labels: SPEAKER_00, SPEAKER_01, ...
- aligner and text resegmentation canonicalize them: SPEAKER_00 -> A, SPEAKER_01 -> B, ...
Labels that do not follow the tag convention (e.g. "Doctor") pass through unchanged.
"""
from __future__ import annotations

import re

SPEAKER_TAG = "SPEAKER_"

_TAG_RE = re.compile(re.escape(SPEAKER_TAG) + r"(\d+)")


def speaker_tag(index: int) -> str:
    """Raw label for solo speaker index: SPEAKER_00, SPEAKER_01, ..."""
    return f"{SPEAKER_TAG}{index:02d}"


def speaker_symbol(index: int) -> str:
    """Canonical symbol for speaker index: 0 -> A, 25 -> Z, 26 -> AA, 27 -> AB, ..."""
    symbol = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        symbol = chr(65 + rem) + symbol
    return symbol


def canonical_speaker(label: str) -> str:
    """SPEAKER_<N> -> canonical letter for N; any other label is returned as-is."""
    match = _TAG_RE.search(label)
    if match:
        return speaker_symbol(int(match.group(1)))
    return label
