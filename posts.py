from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class PostStoreError(Exception):
    pass


class PostNotFound(PostStoreError):
    def __init__(self, slug: str):
        super().__init__(f'The post with the slug "{slug}" does not exist')
        self.slug = slug


class PostConflict(PostStoreError):
    def __init__(self, slug: str):
        super().__init__(f'A post with the slug "{slug}" already exists')
        self.slug = slug


@dataclass
class Post:
    slug: str
    title: str
    markdown: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Dict) -> "Post":
        return cls(
            slug=raw.get("slug", ""),
            title=raw.get("title", ""),
            markdown=raw.get("markdown", ""),
        )


class PostStore:
    """Posts kept in a single JSON file, keyed by slug.

    Every operation reads the whole file and, for mutations, writes it back.
    There is no locking: concurrent writers race and the last one wins.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def ensure_data_file(self) -> None:
        """Make sure the posts file exists."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.save_data({"posts": []})

    def load_data(self) -> Dict:
        self.ensure_data_file()
        with open(self.path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
        if not isinstance(raw, dict):
            raw = {"posts": raw}
        raw.setdefault("posts", [])
        return raw

    def save_data(self, data: Dict) -> None:
        """Replace the file in one step; a failed write leaves the previous contents."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise

    def _load_posts(self) -> List[Post]:
        return [Post.from_dict(p) for p in self.load_data()["posts"]]

    def _save_posts(self, posts: List[Post]) -> None:
        data = self.load_data()
        data["posts"] = [p.to_dict() for p in posts]
        self.save_data(data)

    def list_posts(self) -> List[Post]:
        return sorted(self._load_posts(), key=lambda p: p.title.lower())

    def get_post(self, slug: str) -> Optional[Post]:
        for post in self._load_posts():
            if post.slug == slug:
                return post
        return None

    def create_post(self, post: Post) -> Post:
        posts = self._load_posts()
        if any(p.slug == post.slug for p in posts):
            raise PostConflict(post.slug)
        posts.append(post)
        self._save_posts(posts)
        logger.info("Created post %s", post.slug)
        return post

    def update_post(self, slug: str, post: Post) -> Post:
        posts = self._load_posts()
        for idx, existing in enumerate(posts):
            if existing.slug == slug:
                break
        else:
            raise PostNotFound(slug)

        if post.slug != slug and any(p.slug == post.slug for p in posts):
            raise PostConflict(post.slug)

        posts[idx] = post
        self._save_posts(posts)
        if post.slug != slug:
            logger.info("Updated post %s (renamed to %s)", slug, post.slug)
        else:
            logger.info("Updated post %s", slug)
        return post

    def delete_post(self, slug: str) -> None:
        posts = self._load_posts()
        remaining = [p for p in posts if p.slug != slug]
        if len(remaining) == len(posts):
            raise PostNotFound(slug)
        self._save_posts(remaining)
        logger.info("Deleted post %s", slug)
