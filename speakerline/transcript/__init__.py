"""Transcript handling: time normalization, word/segment alignment, rendering."""
from .aligner import DEFAULT_SPEAKER, align_words
from .models import Utterance, Word
from .resegment import TextSegment, realign_text_segments
from .timing import TimeValue, to_milliseconds
from .writer import format_utterance_line, render_transcript, write_transcript

__all__ = [
    "DEFAULT_SPEAKER",
    "TextSegment",
    "TimeValue",
    "Utterance",
    "Word",
    "align_words",
    "format_utterance_line",
    "realign_text_segments",
    "render_transcript",
    "to_milliseconds",
    "write_transcript",
]
