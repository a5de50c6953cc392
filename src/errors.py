# src/errors.py

"""Failure taxonomy for the acquisition pipeline.

Every error here is recovered inside the pipeline and turned into a
clearly-labelled fallback value; none of them reaches a caller.
"""


class PipelineError(Exception):
    """Base class for recoverable pipeline failures."""


class FetchFailure(PipelineError):
    """Upstream retrieval failed after exhausting every attempt."""

    def __init__(
        self,
        url: str,
        attempts: int,
        last_error: BaseException | None = None,
    ) -> None:
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        detail = f": {last_error}" if last_error else ""
        super().__init__(
            f"Fetching {url} failed after {attempts} attempt(s){detail}"
        )


class ExtractionEmpty(PipelineError):
    """The extractor found no usable rows in the document."""

    def __init__(self, source: str, shape: str = "unknown") -> None:
        self.source = source
        self.shape = shape
        super().__init__(
            f"No candidate rows extracted from {source} (shape={shape})"
        )


class ValidationAllRejected(PipelineError):
    """Every candidate record failed validation."""

    def __init__(self, rejected: int) -> None:
        self.rejected = rejected
        super().__init__(f"All {rejected} candidate records were rejected")


class ConfigurationMissing(PipelineError):
    """A required setting (e.g. an API key) is not configured."""

    def __init__(self, setting: str) -> None:
        self.setting = setting
        super().__init__(f"{setting} is not configured")
