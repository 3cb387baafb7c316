from pathlib import Path

import pytest

from config import DEFAULT_DATA_PATH, load_settings


def test_load_settings_reads_environment():
    s = load_settings(
        {
            "ADMIN_EMAIL": " boss@example.com ",
            "ADMIN_PASSWORD": "pw",
            "SECRET_KEY": "k",
            "BLOG_DATA_PATH": "/tmp/blog.json",
            "LOG_LEVEL": "debug",
        }
    )
    assert s.admin_email == "boss@example.com"
    assert s.admin_password == "pw"
    assert s.secret_key == "k"
    assert s.data_path == Path("/tmp/blog.json")
    assert s.log_level == "DEBUG"


def test_load_settings_defaults():
    s = load_settings({})
    assert s.data_path == DEFAULT_DATA_PATH
    assert s.admin_email


def test_load_settings_uses_process_environment(monkeypatch):
    monkeypatch.setenv("ADMIN_EMAIL", "env@example.com")
    assert load_settings().admin_email == "env@example.com"


def test_settings_are_immutable():
    s = load_settings({"ADMIN_EMAIL": "a@example.com"})
    with pytest.raises(AttributeError):
        s.admin_email = "b@example.com"


def test_public_env_only_exposes_admin_email():
    s = load_settings({"ADMIN_EMAIL": "a@example.com", "ADMIN_PASSWORD": "secret"})
    assert s.public_env() == {"ADMIN_EMAIL": "a@example.com"}
