"""Create, update and delete posts from the admin edit form.

The form posts back to the same ``/posts/admin/<slug>`` URL it was served from,
with the submit button's ``intent`` telling us what to do. ``<slug>`` is the
reserved value ``new`` while the post does not exist yet.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union

from werkzeug.exceptions import BadRequest

from posts import Post, PostConflict, PostNotFound, PostStore
from rendering import render_markdown

logger = logging.getLogger(__name__)

NEW_SLUG = "new"
# /posts/admin/new is the create form and /posts/admin is the admin listing.
RESERVED_SLUGS = frozenset({NEW_SLUG, "admin"})
ADMIN_POSTS_URL = "/posts/admin"
FIELDS = ("title", "slug", "markdown")


class Intent(enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def parse(cls, value: Optional[str], path_slug: str) -> "Intent":
        # Forms submitted without a button (e.g. scripted) carry no intent.
        if not value:
            return cls.CREATE if path_slug == NEW_SLUG else cls.UPDATE
        try:
            return cls(value)
        except ValueError:
            raise BadRequest(f"Unknown intent: {value!r}") from None


@dataclass
class NewPost:
    post: None = None


@dataclass
class ExistingPost:
    post: Post
    html: str


EditState = Union[NewPost, ExistingPost]


@dataclass
class Redirect:
    location: str
    message: str = ""


@dataclass
class Invalid:
    errors: Dict[str, str]
    values: Dict[str, str] = field(default_factory=dict)


FormResult = Union[Redirect, Invalid]


def validate_post_form(form: Mapping) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for name in FIELDS:
        if not form.get(name):
            errors[name] = f"{name.capitalize()} is required"

    slug = form.get("slug")
    if slug in RESERVED_SLUGS:
        errors["slug"] = f'Slug "{slug}" is reserved'
    return errors


def load_post_for_edit(store: PostStore, slug: str) -> EditState:
    if not slug:
        raise ValueError("slug is required")
    if slug == NEW_SLUG:
        return NewPost()
    post = store.get_post(slug)
    if post is None:
        raise PostNotFound(slug)
    return ExistingPost(post=post, html=render_markdown(post.markdown))


def submit_post_form(store: PostStore, path_slug: str, form: Mapping) -> FormResult:
    if not path_slug:
        raise ValueError("slug is required")
    intent = Intent.parse(form.get("intent"), path_slug)

    if intent is Intent.DELETE:
        store.delete_post(path_slug)
        return Redirect(ADMIN_POSTS_URL, "Post deleted")

    if intent is Intent.CREATE and path_slug != NEW_SLUG:
        raise BadRequest("Posts can only be created from the new post form")
    if intent is Intent.UPDATE and path_slug == NEW_SLUG:
        raise BadRequest("Cannot update a post that does not exist yet")

    values = {name: form.get(name) or "" for name in FIELDS}
    errors = validate_post_form(form)
    if errors:
        logger.debug("Rejected %s of %s: %s", intent.value, path_slug, sorted(errors))
        return Invalid(errors=errors, values=values)

    title, slug, markdown = values["title"], values["slug"], values["markdown"]

    post = Post(slug=slug, title=title, markdown=markdown)
    try:
        if intent is Intent.CREATE:
            store.create_post(post)
            message = "Post created"
        else:
            store.update_post(path_slug, post)
            message = "Post updated"
    except PostConflict:
        return Invalid(errors={"slug": "Slug already exists"}, values=values)

    return Redirect(ADMIN_POSTS_URL, message)
