import logging
import os
from typing import Optional, Tuple

from flask import Flask, flash, redirect, render_template, request, session, url_for
from werkzeug.datastructures import MultiDict

from .auth import (
    AuthenticationError,
    IdentityProvider,
    SessionContext,
    current_session,
    end_session,
    login_required,
    start_session,
)
from .collection import CollectionStore, DeleteConfirmation, Notification
from .filters import RecipeQuery
from .forms import RecipeForm, parse_count
from .models import Cuisine, Difficulty, Recipe, RecipeDraft, coerce_enum
from .presentation import (
    CUISINE_OPTIONS,
    DIFFICULTY_OPTIONS,
    difficulty_class,
    empty_state,
    ingredient_preview,
    total_time,
)
from .storage import RecipeRepository

try:
    from .gcp_identity import FirestoreIdentityProvider
    from .gcp_storage import FirestoreRecipeStorage
except ImportError:  # pragma: no cover - allows running tests without optional deps
    FirestoreIdentityProvider = None  # type: ignore[assignment,misc]
    FirestoreRecipeStorage = None  # type: ignore[assignment,misc]

logger = logging.getLogger(__name__)

PENDING_DELETE_KEY = "pending_delete"

COUNT_FIELDS = (
    ("prep_time", "Prep time", 0),
    ("cook_time", "Cook time", 0),
    ("servings", "Servings", 1),
)


def create_app(
    storage: Optional[RecipeRepository] = None,
    identity: Optional[IdentityProvider] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application will use
        :class:`FirestoreRecipeStorage` configured through environment variables.
    identity:
        Optional identity provider. When ``None`` the application will use
        :class:`FirestoreIdentityProvider` configured the same way.
    """

    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "development-secret-change-me")

    if storage is None or identity is None:
        if FirestoreRecipeStorage is None or FirestoreIdentityProvider is None:
            raise RuntimeError(
                "google-cloud-firestore is not installed. Install optional dependencies "
                "or pass explicit storage and identity backends to create_app."
            )
        storage = storage or FirestoreRecipeStorage.from_env()
        identity = identity or FirestoreIdentityProvider.from_env()
    app.config["RECIPE_STORAGE"] = storage
    app.config["IDENTITY_PROVIDER"] = identity

    app.add_template_filter(total_time)
    app.add_template_filter(ingredient_preview)
    app.add_template_filter(difficulty_class)
    app.jinja_env.globals.update(
        cuisine_options=CUISINE_OPTIONS,
        difficulty_options=DIFFICULTY_OPTIONS,
    )

    def collection_for(ctx: SessionContext) -> CollectionStore:
        return CollectionStore(app.config["RECIPE_STORAGE"], ctx.user_id, notify=_flash)

    @app.get("/auth")
    def auth() -> str:
        if current_session() is not None:
            return redirect(url_for("index"))
        return render_template("auth.html", title="Sign in")

    @app.post("/auth/sign-in")
    def sign_in() -> str:
        provider: IdentityProvider = app.config["IDENTITY_PROVIDER"]
        try:
            ctx = provider.sign_in(request.form.get("email", ""), request.form.get("password", ""))
        except AuthenticationError as exc:
            flash(str(exc), "error")
            return redirect(url_for("auth"))

        start_session(ctx)
        logger.info("User signed in", extra={"user_id": ctx.user_id})
        return redirect(url_for("index"))

    @app.post("/auth/sign-up")
    def sign_up() -> str:
        provider: IdentityProvider = app.config["IDENTITY_PROVIDER"]
        try:
            ctx = provider.sign_up(request.form.get("email", ""), request.form.get("password", ""))
        except AuthenticationError as exc:
            flash(str(exc), "error")
            return redirect(url_for("auth"))

        start_session(ctx)
        logger.info("User signed up", extra={"user_id": ctx.user_id})
        flash("Account created.", "success")
        return redirect(url_for("index"))

    @app.post("/auth/sign-out")
    def sign_out() -> str:
        end_session()
        return redirect(url_for("auth"))

    @app.get("/")
    @login_required
    def index(ctx: SessionContext) -> str:
        store = collection_for(ctx)
        store.load()
        query = RecipeQuery.from_args(request.args)
        recipes = store.visible(query)

        pending = DeleteConfirmation(session.get(PENDING_DELETE_KEY))
        pending_recipe = store.find(pending.pending_id) if pending.is_pending else None
        store.close()

        empty_title, empty_message = empty_state(len(store.recipes))
        return render_template(
            "index.html",
            user=ctx,
            recipes=recipes,
            collection_size=len(store.recipes),
            query=query,
            empty_title=empty_title,
            empty_message=empty_message,
            pending_delete=pending.pending_id,
            pending_recipe=pending_recipe,
            title="Recipe Organizer",
        )

    @app.get("/recipes/new")
    @login_required
    def new_recipe(ctx: SessionContext) -> str:
        return _render_form(RecipeForm())

    @app.post("/recipes")
    @login_required
    def create_recipe(ctx: SessionContext) -> str:
        draft, errors = _draft_from_form(request.form)
        form = RecipeForm.resume(draft)
        return _handle_form_post(form, errors, collection_for(ctx))

    @app.get("/recipes/<recipe_id>/edit")
    @login_required
    def edit_recipe(ctx: SessionContext, recipe_id: str) -> str:
        store = collection_for(ctx)
        loaded = store.load()
        recipe = store.find(recipe_id)
        store.close()

        if recipe is None:
            if loaded:
                flash("Recipe not found.", "error")
            return redirect(url_for("index"))

        return _render_form(RecipeForm(recipe=recipe))

    @app.post("/recipes/<recipe_id>")
    @login_required
    def update_recipe(ctx: SessionContext, recipe_id: str) -> str:
        draft, errors = _draft_from_form(request.form)
        form = RecipeForm.resume(draft, recipe_id)
        return _handle_form_post(form, errors, collection_for(ctx))

    @app.post("/recipes/<recipe_id>/delete")
    @login_required
    def delete_recipe(ctx: SessionContext, recipe_id: str) -> str:
        pending = DeleteConfirmation()
        pending.request(recipe_id)
        session[PENDING_DELETE_KEY] = pending.pending_id
        return redirect(url_for("index"))

    @app.post("/recipes/delete/confirm")
    @login_required
    def confirm_delete(ctx: SessionContext) -> str:
        pending = DeleteConfirmation(session.pop(PENDING_DELETE_KEY, None))
        pending.confirm(collection_for(ctx))
        return redirect(url_for("index"))

    @app.post("/recipes/delete/cancel")
    @login_required
    def cancel_delete(ctx: SessionContext) -> str:
        pending = DeleteConfirmation(session.pop(PENDING_DELETE_KEY, None))
        pending.cancel()
        return redirect(url_for("index"))

    return app


def _handle_form_post(form: RecipeForm, input_errors: dict, store: CollectionStore):
    action = request.form.get("action", "save")

    if action == "add_ingredient":
        form.add_ingredient_slot()
        return _render_form(form)

    if action.startswith("remove_ingredient:"):
        try:
            index = int(action.split(":", 1)[1])
        except ValueError:
            index = -1
        form.remove_ingredient_slot(index)
        return _render_form(form)

    if input_errors:
        form.field_errors = {**form.validate(), **input_errors}
        return _render_form(form), 400

    if form.submit(store):
        return redirect(url_for("index"))

    if form.field_errors:
        return _render_form(form), 400

    return _render_form(form)


def _render_form(form: RecipeForm) -> str:
    page_title = "Edit Recipe" if form.is_update else "Add New Recipe"
    return render_template("recipe_form.html", form=form, draft=form.draft, title=page_title)


def _draft_from_form(form: MultiDict) -> Tuple[RecipeDraft, dict]:
    errors = {}
    counts = {}
    for name, label, minimum in COUNT_FIELDS:
        try:
            counts[name] = parse_count(form.get(name), minimum)
        except ValueError:
            counts[name] = None
            errors[name] = f"{label} must be a whole number of at least {minimum}."

    draft = RecipeDraft(
        title=form.get("title", ""),
        ingredients=form.getlist("ingredients"),
        instructions=form.get("instructions", ""),
        difficulty=coerce_enum(Difficulty, form.get("difficulty"), Difficulty.MEDIUM),
        cuisine=coerce_enum(Cuisine, form.get("cuisine"), Cuisine.OTHER),
        **counts,
    )
    return draft, errors


def _flash(notification: Notification) -> None:
    flash(notification.message, notification.category)


__all__ = ["create_app", "Recipe"]
