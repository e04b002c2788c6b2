"""
Transcript structures: input words and speaker-labeled output utterances.

Word times are kept raw (TimeValue) and normalized once by the aligner;
Utterance times are always milliseconds.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from speakerline.transcript.timing import TimeValue, to_milliseconds


@dataclass
class Word:
    """One STT word with raw start/end (any TimeValue variant)."""

    text: str
    start: TimeValue = None
    end: TimeValue = None

    @property
    def start_ms(self) -> float:
        return to_milliseconds(self.start)

    @property
    def end_ms(self) -> float:
        return to_milliseconds(self.end)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Word":
        """Accept {text, start, end} or Google-style {word, startTime, endTime}."""
        text = data.get("text")
        if text is None:
            text = data.get("word", "")
        start = data.get("start", data.get("startTime"))
        end = data.get("end", data.get("endTime"))
        return cls(text=str(text), start=start, end=end)


@dataclass
class Utterance:
    """
    Maximal run of consecutive words attributed to one speaker.

    text: word texts joined with single spaces, in original order.
    start_ms, end_ms: first word start, last word end.
    """

    speaker: str
    text: str
    start_ms: float
    end_ms: float

    def to_dict(self) -> dict[str, Any]:
        """JSON shape: {speaker, text, start, end} (ms)."""
        return {"speaker": self.speaker, "text": self.text, "start": self.start_ms, "end": self.end_ms}
