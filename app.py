from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import (
    Blueprint,
    Flask,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    session,
    url_for,
)
from werkzeug.exceptions import HTTPException, InternalServerError

import config
from post_form import (
    NEW_SLUG,
    ExistingPost,
    Invalid,
    load_post_for_edit,
    submit_post_form,
)
from posts import PostNotFound, PostStore
from rendering import build_excerpt, render_markdown

logger = logging.getLogger(__name__)

bp = Blueprint("blog", __name__)


def get_settings() -> config.Settings:
    return current_app.config["SETTINGS"]


def get_store() -> PostStore:
    return current_app.config["POST_STORE"]


def is_authenticated() -> bool:
    return session.get("user") == get_settings().admin_email


def current_admin_email() -> Optional[str]:
    return session.get("user") if is_authenticated() else None


def require_admin(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not is_authenticated():
            return redirect(url_for("blog.login", next=request.path))
        return view(*args, **kwargs)

    return wrapped


@bp.app_context_processor
def inject_globals():
    settings = get_settings()
    return {
        "site_title": settings.site_title,
        "ENV": settings.public_env(),
        "is_authenticated": is_authenticated,
        "current_admin_email": current_admin_email,
        "build_excerpt": build_excerpt,
    }


@bp.route("/")
def index():
    return redirect(url_for("blog.posts_index"))


@bp.route("/posts")
def posts_index():
    posts = get_store().list_posts()
    return render_template("posts_index.html", posts=posts, render_markdown=render_markdown)


@bp.route("/posts/<slug>")
def post_detail(slug: str):
    post = get_store().get_post(slug)
    if post is None:
        raise PostNotFound(slug)
    return render_template("post_detail.html", post=post, html=render_markdown(post.markdown))


@bp.route("/login", methods=["GET", "POST"])
def login():
    settings = get_settings()
    if request.method == "POST":
        email = request.form.get("email", "").strip()
        password = request.form.get("password", "")
        if email == settings.admin_email and password == settings.admin_password:
            session["user"] = settings.admin_email
            flash("Logged in", "success")
            target = request.args.get("next") or ""
            if not target.startswith("/") or target.startswith("//"):
                target = url_for("blog.admin_posts")
            return redirect(target)
        logger.warning("Rejected admin login for %r", email)
        flash("Invalid credentials", "error")
    return render_template("login.html")


@bp.route("/logout")
def logout():
    session.clear()
    flash("Logged out", "success")
    return redirect(url_for("blog.posts_index"))


@bp.route("/posts/admin")
@require_admin
def admin_posts():
    posts = get_store().list_posts()
    return render_template("admin_posts.html", posts=posts)


@bp.route("/posts/admin/<slug>", methods=["GET", "POST"])
@require_admin
def admin_edit_post(slug: str):
    store = get_store()
    is_new = slug == NEW_SLUG

    if request.method == "POST":
        result = submit_post_form(store, slug, request.form)
        if isinstance(result, Invalid):
            return (
                render_template(
                    "admin_edit.html",
                    post=None,
                    html=None,
                    values=result.values,
                    errors=result.errors,
                    is_new=is_new,
                    form_key=slug,
                ),
                400,
            )
        if result.message:
            flash(result.message, "success")
        return redirect(result.location)

    state = load_post_for_edit(store, slug)
    if isinstance(state, ExistingPost):
        post, html, values = state.post, state.html, state.post.to_dict()
    else:
        post, html, values = None, None, {"title": "", "slug": "", "markdown": ""}
    return render_template(
        "admin_edit.html",
        post=post,
        html=html,
        values=values,
        errors={},
        is_new=post is None,
        form_key=post.slug if post else NEW_SLUG,
    )


@bp.errorhandler(PostNotFound)
def post_not_found(exc: PostNotFound):
    return render_template("not_found.html", slug=exc.slug), 404


@bp.errorhandler(HTTPException)
def unsupported_status(exc: HTTPException):
    logger.warning("Unsupported thrown response status code: %s (%s)", exc.code, request.path)
    message = f"Unsupported thrown response status code: {exc.code}"
    if exc.description:
        message = f"{message}: {exc.description}"
    return render_template("error.html", message=message), exc.code


def internal_error(exc: InternalServerError):
    original = getattr(exc, "original_exception", None)
    if original is not None:
        logger.error("Unhandled error on %s", request.path, exc_info=original)
    message = str(original) if original is not None and str(original) else None
    return render_template("error.html", message=message), 500


def configure_logging(settings: config.Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(
    settings: Optional[config.Settings] = None,
    store: Optional[PostStore] = None,
) -> Flask:
    settings = settings or config.load_settings()
    configure_logging(settings)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["SETTINGS"] = settings
    app.config["POST_STORE"] = store if store is not None else PostStore(settings.data_path)

    app.register_blueprint(bp)
    app.register_error_handler(InternalServerError, internal_error)
    logger.info("Blog admin ready for %s", settings.admin_email)
    return app


if __name__ == "__main__":
    create_app().run(debug=True)
