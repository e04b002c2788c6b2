"""Collaborator services (hosted LLM): role relabeling and text-only resegmentation."""
from speakerline.services.llm_client import ChatCompletionClient
from speakerline.services.relabel_service import apply_speaker_mapping, refine_speaker_labels
from speakerline.services.resegment_service import diarize_with_llm, resegment_words

__all__ = [
    "ChatCompletionClient",
    "apply_speaker_mapping",
    "diarize_with_llm",
    "refine_speaker_labels",
    "resegment_words",
]
