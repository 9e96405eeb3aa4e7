"""Configuration utilities for skinnyspec.

Settings come from the environment so a test suite can point the DSL at its
own login route, test host or database without code changes:

- ``SKINNYSPEC_LOGIN_PATH``: where unauthenticated requests should redirect
  (default ``/login``).
- ``SKINNYSPEC_HOST``: host used to build ``*_url`` helpers (default ``test.host``).
- ``SKINNYSPEC_REFERER``: referring page used by ``it_should_redirect_to_referer``.
- ``SKINNYSPEC_MEMBER_ID``: id sent to member actions by ``with_restful_actions``.
- ``SKINNYSPEC_DB_URL``: database the bundled SQLAlchemy models bind to.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_PREFIX = "SKINNYSPEC_"  # pragma: no mutate

DEFAULT_LOGIN_PATH = "/login"
DEFAULT_HOST = "test.host"
DEFAULT_MEMBER_ID = 1
DEFAULT_DB_URL = "sqlite+pysqlite:///:memory:"


class InvalidSettingError(ValueError):
    """Raised when an environment variable holds an unusable value."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid value for {ENV_PREFIX}{name}={value!r}: {reason}")
        self.name = name
        self.value = value


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings shared by the harness and the example helpers."""

    login_path: str = DEFAULT_LOGIN_PATH
    host: str = DEFAULT_HOST
    referer: str = f"http://{DEFAULT_HOST}/referer"
    member_id: int = DEFAULT_MEMBER_ID
    db_url: str = DEFAULT_DB_URL

    @property
    def base_url(self) -> str:
        return f"http://{self.host}"


def _member_id(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise InvalidSettingError("MEMBER_ID", raw, "expected an integer") from e
    if value < 1:
        raise InvalidSettingError("MEMBER_ID", raw, "expected a positive integer")
    return value


def _path(name: str, raw: str) -> str:
    if not raw.startswith("/"):
        raise InvalidSettingError(name, raw, "expected an absolute path")
    return raw


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from environment variables.

    Args:
        environ: Mapping to read instead of ``os.environ`` (handy in tests).

    Returns:
        Settings: Values from the environment, defaults for anything unset.

    Raises:
        InvalidSettingError: If a variable is set to an unusable value.
    """
    env = os.environ if environ is None else environ

    def get(name: str) -> str | None:
        return env.get(ENV_PREFIX + name) or None

    host = get("HOST") or DEFAULT_HOST
    login_path = get("LOGIN_PATH")
    member_id = get("MEMBER_ID")
    return Settings(
        login_path=_path("LOGIN_PATH", login_path) if login_path else DEFAULT_LOGIN_PATH,
        host=host,
        referer=get("REFERER") or f"http://{host}/referer",
        member_id=_member_id(member_id) if member_id else DEFAULT_MEMBER_ID,
        db_url=get("DB_URL") or DEFAULT_DB_URL,
    )
