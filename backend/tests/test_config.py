import pytest
from pydantic import ValidationError

from config import Settings


def test_secret_key_has_no_default(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValidationError, match="SECRET_KEY"):
        Settings(_env_file=None)


def test_cookie_secure_follows_environment_unless_overridden():
    assert Settings(_env_file=None, SECRET_KEY="k", ENVIRONMENT="production").cookie_secure is True
    assert Settings(_env_file=None, SECRET_KEY="k", ENVIRONMENT="development").cookie_secure is False
    assert Settings(
        _env_file=None, SECRET_KEY="k", ENVIRONMENT="production", COOKIE_SECURE=False,
    ).cookie_secure is False
