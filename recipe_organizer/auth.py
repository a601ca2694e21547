from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional, Protocol

from flask import redirect, session, url_for

MIN_PASSWORD_LENGTH = 6


class AuthenticationError(Exception):
    """Sign-in or sign-up was refused; ``str(exc)`` is shown to the user."""


@dataclass(frozen=True)
class SessionContext:
    """The signed-in user, passed explicitly to everything that needs scoping."""

    user_id: str
    email: str


class IdentityProvider(Protocol):
    def sign_in(self, email: str, password: str) -> SessionContext:
        """Return the matching user or raise :class:`AuthenticationError`."""

    def sign_up(self, email: str, password: str) -> SessionContext:
        """Register a new user or raise :class:`AuthenticationError`."""


def start_session(ctx: SessionContext) -> None:
    session.clear()
    session["user_id"] = ctx.user_id
    session["email"] = ctx.email


def end_session() -> None:
    session.clear()


def current_session() -> Optional[SessionContext]:
    user_id = session.get("user_id")
    if not user_id:
        return None
    return SessionContext(user_id=user_id, email=session.get("email", ""))


def login_required(view: Callable) -> Callable:
    """Redirect anonymous users to the sign-in page; otherwise pass ``ctx`` to the view."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        ctx = current_session()
        if ctx is None:
            return redirect(url_for("auth"))
        return view(ctx, *args, **kwargs)

    return wrapper


def normalize_email(email: str) -> str:
    return email.strip().lower()


__all__ = [
    "AuthenticationError",
    "IdentityProvider",
    "MIN_PASSWORD_LENGTH",
    "SessionContext",
    "current_session",
    "end_session",
    "login_required",
    "normalize_email",
    "start_session",
]
