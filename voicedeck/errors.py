"""Domain exceptions for speech-service and CLI diagnostics."""

from __future__ import annotations


class SpeechStageError(RuntimeError):
    """Raised when a specific speech-service stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped speech error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
