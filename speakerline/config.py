"""Application configuration. Loads from env vars."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings. Override via environment variables."""

    # Audio: segmentation model expects float32 mono @ 16kHz
    SAMPLE_RATE: int = 16000

    # Acoustic diarization (powerset segmentation model, e.g. pyannote-segmentation-3.0 ONNX).
    DIARIZATION_ENABLED: bool = True
    SEGMENTATION_MODEL_PATH: str = ""  # empty = no acoustic model; loaded once at startup

    # Hosted LLM (OpenAI-compatible chat completions; Groq by default)
    LLM_ENABLED: bool = True
    LLM_BASE_URL: str = "https://api.groq.com/openai/v1"
    LLM_API_KEY: str = ""
    LLM_MODEL: str = "llama-3.3-70b-versatile"
    LLM_TIMEOUT_SEC: float = 60.0
    LLM_TEMPERATURE: float = 0.0

    # Role relabeling: map generic symbols (A, B) to roles using the first N utterances.
    RELABEL_ENABLED: bool = True
    RELABEL_SAMPLE_UTTERANCES: int = 20
    RELABEL_ROLES: str = "Doctor,Patient"  # comma-separated

    # Text resegmentation: used when acoustic segments are unavailable.
    RESEGMENT_ENABLED: bool = True
    RESEGMENT_ROLES: str = "Doctor,Patient,Caregiver"  # comma-separated

    # Plain-text rendering: prefix each line with [MM:SS.ss]
    TRANSCRIPT_ADD_TIMESTAMPS: bool = False

    # Logging: level (DEBUG, INFO, WARNING, ERROR); file path empty = console only.
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def llm_configured(self) -> bool:
        return bool(self.LLM_ENABLED and self.LLM_API_KEY.strip())


def split_roles(raw: str) -> list[str]:
    """Comma-separated role list -> ["Doctor", "Patient"]; blanks dropped."""
    return [r.strip() for r in (raw or "").split(",") if r.strip()]


def get_settings() -> Settings:
    return Settings()
