from __future__ import annotations

import logging
import os
from typing import Optional

from google.api_core import exceptions as gcloud_exceptions
from google.cloud import firestore
from werkzeug.security import check_password_hash, generate_password_hash

from .auth import (
    MIN_PASSWORD_LENGTH,
    AuthenticationError,
    IdentityProvider,
    SessionContext,
    normalize_email,
)
from .storage import remote_message

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


class FirestoreIdentityProvider(IdentityProvider):
    """User accounts stored in Firestore, keyed by lower-cased email."""

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "users",
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._firestore_client = client or firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)

    @classmethod
    def from_env(cls) -> "FirestoreIdentityProvider":
        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("USERS_COLLECTION", "users")
        return cls(project=project, collection_name=collection_name)

    def sign_in(self, email: str, password: str) -> SessionContext:
        email = normalize_email(email)
        if not email or not password:
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            snapshot = self._collection.document(email).get()
        except gcloud_exceptions.GoogleAPIError as exc:
            raise AuthenticationError(remote_message(exc)) from exc

        data = (snapshot.to_dict() or {}) if snapshot.exists else {}
        password_hash = data.get("password_hash")
        if not password_hash or not check_password_hash(password_hash, password):
            raise AuthenticationError(INVALID_CREDENTIALS)

        return SessionContext(user_id=data["user_id"], email=email)

    def sign_up(self, email: str, password: str) -> SessionContext:
        email = normalize_email(email)
        if not email or "@" not in email:
            raise AuthenticationError("Please provide a valid email address.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthenticationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )

        doc_ref = self._collection.document(email)
        user_id = self._collection.document().id
        try:
            # ``create`` fails with Conflict when the email is already registered.
            doc_ref.create(
                {
                    "user_id": user_id,
                    "email": email,
                    "password_hash": generate_password_hash(password),
                    "created_at": firestore.SERVER_TIMESTAMP,
                }
            )
        except gcloud_exceptions.Conflict as exc:
            raise AuthenticationError("An account with this email already exists.") from exc
        except gcloud_exceptions.GoogleAPIError as exc:
            raise AuthenticationError(remote_message(exc)) from exc

        logger.info("Registered user %s", user_id)
        return SessionContext(user_id=user_id, email=email)


__all__ = ["FirestoreIdentityProvider"]
