from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional

from google.api_core import exceptions as gcloud_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .models import Recipe, RecipeFields
from .storage import RecipeNotFoundError, RecipeRepository, StorageError, remote_message

logger = logging.getLogger(__name__)


class FirestoreRecipeStorage(RecipeRepository):
    """Recipe storage backed by a Firestore collection with one document per recipe."""

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "recipes",
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._project = project
        self._collection_name = collection_name

        self._firestore_client = client or firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)

    @classmethod
    def from_env(cls) -> "FirestoreRecipeStorage":
        """Build a storage instance from environment variables."""

        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("RECIPES_COLLECTION", "recipes")
        return cls(project=project, collection_name=collection_name)

    def list_recipes(self, owner_id: str) -> Iterable[Recipe]:
        query = self._collection.where(filter=FieldFilter("user_id", "==", owner_id)).order_by(
            "created_at", direction=firestore.Query.DESCENDING
        )
        try:
            # Stream errors must be raised inside this call.
            recipes: List[Recipe] = [
                Recipe.from_document(doc.id, doc.to_dict() or {}) for doc in query.stream()
            ]
        except gcloud_exceptions.GoogleAPIError as exc:
            raise StorageError(remote_message(exc)) from exc
        return recipes

    def add_recipe(self, owner_id: str, fields: RecipeFields) -> Recipe:
        doc = fields.to_document()
        doc["user_id"] = owner_id
        doc["created_at"] = firestore.SERVER_TIMESTAMP

        try:
            doc_ref = self._collection.document()
            doc_ref.set(doc)
            snapshot = doc_ref.get()
        except gcloud_exceptions.GoogleAPIError as exc:
            raise StorageError(remote_message(exc)) from exc

        logger.debug("Created recipe %s for %s", snapshot.id, owner_id)
        return Recipe.from_document(snapshot.id, snapshot.to_dict() or {})

    def update_recipe(self, owner_id: str, recipe_id: str, fields: RecipeFields) -> Recipe:
        try:
            doc_ref = self._owned_document(owner_id, recipe_id)
            doc_ref.update(fields.to_document())
            snapshot = doc_ref.get()
        except gcloud_exceptions.GoogleAPIError as exc:
            raise StorageError(remote_message(exc)) from exc

        logger.debug("Updated recipe %s for %s", recipe_id, owner_id)
        return Recipe.from_document(snapshot.id, snapshot.to_dict() or {})

    def delete_recipe(self, owner_id: str, recipe_id: str) -> None:
        try:
            doc_ref = self._owned_document(owner_id, recipe_id)
            doc_ref.delete()
        except gcloud_exceptions.GoogleAPIError as exc:
            raise StorageError(remote_message(exc)) from exc

        logger.debug("Deleted recipe %s for %s", recipe_id, owner_id)

    def _owned_document(self, owner_id: str, recipe_id: str) -> firestore.DocumentReference:
        doc_ref = self._collection.document(recipe_id)
        snapshot = doc_ref.get()

        # Someone else's recipe is reported exactly like a missing one.
        if not snapshot.exists or (snapshot.to_dict() or {}).get("user_id") != owner_id:
            raise RecipeNotFoundError(f"Recipe '{recipe_id}' does not exist.")

        return doc_ref


__all__ = ["FirestoreRecipeStorage"]
