"""Settings for the analysis engine."""

from pydantic import BaseModel, Field


class AnalysisSettings(BaseModel):
    """Configuration for the Claude-backed analysis engine.

    Attributes:
        model: Claude model name.
        max_tokens: Maximum tokens per response.
        min_call_interval_seconds: Minimum spacing between the end of one call
            and the start of the next.
        max_retries: Retry ceiling for rate-limited calls.
        retry_base_delay_seconds: Base of the exponential backoff.
        max_transcript_chars: Transcript truncation budget.
    """

    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = Field(default=4000, ge=100, le=16000)
    min_call_interval_seconds: float = Field(default=1.0, ge=0.0)
    max_retries: int = Field(default=3, ge=0, le=10)
    retry_base_delay_seconds: float = Field(default=1.0, ge=0.0)
    max_transcript_chars: int = Field(default=30_000, ge=1000)
