"""
Error hierarchy for intent prediction.

Only ``NoModelAvailable`` escapes a prediction request; store misses,
detection failures and per-language predict errors are absorbed by the
orchestrator and turned into "unusable for this language".
"""

from typing import Any, Optional, Sequence


class PolyglotNLUError(Exception):
    """Base for all typed errors raised by this package."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": type(self).__name__,
            "message": self.message,
        }


class NoModelAvailable(PolyglotNLUError):
    """No candidate language produced a usable prediction."""

    def __init__(self, languages: Sequence[str]) -> None:
        self.languages = list(languages)
        super().__init__(
            f"No model found for the following languages: {', '.join(self.languages)}"
        )


class ModelLoadingError(PolyglotNLUError):
    """A serialized model could not be parsed, validated or loaded."""

    def __init__(self, component: str, cause: Optional[BaseException] = None) -> None:
        self.component = component
        self.cause = cause
        message = f"{component} could not load model"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class NotTrained(PolyglotNLUError):
    """An operation needing a model was called before train() or load()."""

    def __init__(self, component: str, operation: str) -> None:
        self.component = component
        self.operation = operation
        super().__init__(f"{component} must be trained before calling {operation}.")


class ModelNotFound(PolyglotNLUError):
    """The model store holds nothing matching the requested id or query."""

    def __init__(self, query: Any) -> None:
        self.query = query
        super().__init__(f"No model matches {query}")
