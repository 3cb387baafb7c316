from pathlib import Path

import pytest

from app import create_app
from config import Settings
from posts import Post, PostStore

ADMIN_EMAIL = "editor@example.com"
ADMIN_PASSWORD = "hunter2"


class RecordingStore(PostStore):
    """PostStore that records every call made against it."""

    def __init__(self, path: Path):
        super().__init__(path)
        self.calls = []

    def list_posts(self):
        self.calls.append(("list_posts",))
        return super().list_posts()

    def get_post(self, slug):
        self.calls.append(("get_post", slug))
        return super().get_post(slug)

    def create_post(self, post):
        self.calls.append(("create_post", post.slug))
        return super().create_post(post)

    def update_post(self, slug, post):
        self.calls.append(("update_post", slug, post.slug))
        return super().update_post(slug, post)

    def delete_post(self, slug):
        self.calls.append(("delete_post", slug))
        return super().delete_post(slug)


class ExplodingStore(PostStore):
    """Store whose reads always fail."""

    def get_post(self, slug):
        raise RuntimeError("disk on fire")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        secret_key="test-secret",
        data_path=tmp_path / "posts.json",
    )


@pytest.fixture
def store(settings):
    store = RecordingStore(settings.data_path)
    store.save_data(
        {
            "posts": [
                Post(slug="first", title="First", markdown="# First post").to_dict(),
                Post(slug="second", title="Second", markdown="*second*").to_dict(),
            ]
        }
    )
    return store


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    with client.session_transaction() as sess:
        sess["user"] = ADMIN_EMAIL
    return client
