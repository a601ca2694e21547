from __future__ import annotations

from typing import Dict, Optional


class RecipeError(Exception):
    """Base class for failures surfaced to the user as a notification."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FetchFailed(RecipeError):
    pass


class CreateFailed(RecipeError):
    pass


class UpdateFailed(RecipeError):
    pass


class DeleteFailed(RecipeError):
    pass


class ValidationFailed(RecipeError):
    """Raised locally when a draft is missing required fields."""

    def __init__(self, fields: Dict[str, str], message: Optional[str] = None) -> None:
        super().__init__(message or "Please fill in the required fields.")
        self.fields = dict(fields)


__all__ = [
    "CreateFailed",
    "DeleteFailed",
    "FetchFailed",
    "RecipeError",
    "UpdateFailed",
    "ValidationFailed",
]
