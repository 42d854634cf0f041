"""Error hierarchy for the rewrite flow.

Every error names the phase that failed so the editor can show a single
message like "Rewrite failed (generation): ...".
"""


class RewriterError(Exception):
    """Base exception for rewrite and model-selection failures."""

    phase = "rewrite"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {
            "error": type(self).__name__,
            "phase": self.phase,
            "message": self.message,
        }


class MissingCredential(RewriterError):
    """No API key was supplied."""

    phase = "credential"

    def __init__(self, message: str = "Please set the API key first."):
        super().__init__(message)


class DeprecatedModelSelected(RewriterError):
    """The resolved model is the retired default and must be replaced."""

    phase = "validation"

    def __init__(self, model_name: str):
        super().__init__(
            f"The default model '{model_name}' is deprecated. "
            f"Please select a valid Gemini model to proceed."
        )
        self.model_name = model_name

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail["model"] = self.model_name
        detail["action"] = "select_model"
        return detail


class CatalogFetchError(RewriterError):
    """Listing models failed at the transport or HTTP level."""

    phase = "model_listing"


class EmptyCatalog(RewriterError):
    """The catalog returned no model that supports rewriting."""

    phase = "model_listing"

    def __init__(self, message: str = "No available models found for generateContent."):
        super().__init__(message)


class GenerationError(RewriterError):
    """The generation call failed; the selection is left untouched."""

    phase = "generation"


class PersistenceError(RewriterError):
    """Writing the selected model to the settings store failed.

    Only ever logged; the session override keeps the process correct.
    """

    phase = "persistence"
