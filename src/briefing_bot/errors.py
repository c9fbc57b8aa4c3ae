"""Error taxonomy for the briefing bot."""


class BriefingError(Exception):
    """Base class for all briefing bot errors."""


class SourceUnavailableError(BriefingError):
    """An external fetch (videos, transcript, quote) failed."""


class AnalysisMalformedError(BriefingError):
    """The LLM response could not be parsed into the expected JSON shape."""


class RateLimitedError(BriefingError):
    """The LLM backend kept rate limiting after all retries were used."""


class CacheMissError(BriefingError):
    """A required cache record is absent or expired."""


class BatchFatalError(BriefingError):
    """A whole pipeline run cannot proceed (market or item enumeration failed)."""
