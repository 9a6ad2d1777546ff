from __future__ import annotations

import logging
import os
from enum import StrEnum
from functools import cache
from typing import NamedTuple

logger = logging.getLogger(__name__)


class Env(StrEnum):
    LOCAL = "local"
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


_ALIASES: dict[str, Env] = {
    "development": Env.DEV,
    "testing": Env.TEST,
    "staging": Env.TEST,
    "production": Env.PROD,
}


def _normalize(raw: str | None) -> Env | None:
    if not raw:
        return None
    value = raw.strip().lower()
    try:
        return Env(value)
    except ValueError:
        return _ALIASES.get(value)


@cache
def get_env() -> Env:
    """APP_ENV, read once per process. Unknown values run as LOCAL."""
    raw = os.getenv("APP_ENV")
    env = _normalize(raw)
    if env is None:
        if raw:
            logger.warning("Unrecognized APP_ENV %r, running as 'local'", raw)
        return Env.LOCAL
    return env


class EnvFlags(NamedTuple):
    env: Env
    is_local: bool
    is_dev: bool
    is_test: bool
    is_prod: bool


def get_env_flags(env: Env | None = None) -> EnvFlags:
    current = env or get_env()
    return EnvFlags(
        env=current,
        is_local=current is Env.LOCAL,
        is_dev=current is Env.DEV,
        is_test=current is Env.TEST,
        is_prod=current is Env.PROD,
    )
