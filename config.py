import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

# Paths
BASE_DIR = Path(__file__).parent
DEFAULT_DATA_PATH = BASE_DIR / "data" / "posts.json"

# Site metadata
DEFAULT_SITE_TITLE = "slugpost"


@dataclass(frozen=True)
class Settings:
    admin_email: str
    admin_password: str
    secret_key: str
    data_path: Path
    site_title: str = DEFAULT_SITE_TITLE
    log_level: str = "INFO"

    def public_env(self) -> Dict[str, str]:
        """Values that are safe to expose to templates and the browser."""
        return {"ADMIN_EMAIL": self.admin_email}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        admin_email=env.get("ADMIN_EMAIL", "admin@slugpost.dev").strip(),
        admin_password=env.get("ADMIN_PASSWORD", "slugpost123"),
        secret_key=env.get("SECRET_KEY", "dev-secret-change-me"),
        data_path=Path(env.get("BLOG_DATA_PATH") or DEFAULT_DATA_PATH),
        site_title=env.get("SITE_TITLE", DEFAULT_SITE_TITLE),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )
