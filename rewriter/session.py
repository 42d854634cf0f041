"""
Session state for the running process.

Holds the model chosen during this process. It outranks every stored setting
until restart and is never cleared, even after the choice has been persisted.
"""
from typing import Optional


class SessionState:
    """In-memory session override shared by the resolver and the selector."""

    def __init__(self, model_name: Optional[str] = None):
        self._model_name = model_name

    @property
    def model_name(self) -> Optional[str]:
        return self._model_name

    def set_model(self, model_name: str) -> None:
        # Plain assignment; nothing here can fail or suspend.
        self._model_name = model_name

    def has_override(self) -> bool:
        return bool(self._model_name)

    def __repr__(self) -> str:
        return f"SessionState(model_name={self._model_name!r})"
