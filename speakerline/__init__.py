"""Speaker-labeled conversation transcripts from powerset diarization scores and STT words."""
