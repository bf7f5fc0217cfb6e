"""Runtime configuration for the storefront (read from the environment, overridable in tests)."""
import os
from typing import NamedTuple

STORAGE_BACKENDS = ("memory", "sql")


class ConfigState(NamedTuple):
    storage: str
    database_url: str
    seed: bool
    log_level: str


def _flag(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


def load_from_env() -> ConfigState:
    storage = os.getenv("STOREFRONT_STORAGE", "memory").lower()
    if storage not in STORAGE_BACKENDS:
        raise ValueError(f"unknown storage backend: {storage}")
    return ConfigState(
        storage=storage,
        database_url=os.getenv("DATABASE_URL", "sqlite:///./storefront.db"),
        seed=_flag(os.getenv("STOREFRONT_SEED", "1")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


state = load_from_env()


def set_state(**changes) -> ConfigState:
    global state
    state = state._replace(**changes)
    return state


def get_state() -> ConfigState:
    return state
