"""
Runtime configuration.

Values come from the environment, with a `.env` file in the project root
loaded first. Every variable has a development default except the Supabase
credentials, which are only required when SALES_STORAGE_BACKEND=supabase.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from the .env file next to the packages
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

STORAGE_BACKENDS = ("memory", "supabase")
INITIAL_STATUS_POLICY_NAMES = ("random", "pending")


@dataclass(frozen=True, slots=True)
class Settings:
    user_service_url: str = "http://localhost:8080/users"
    user_service_timeout: float = 5.0
    storage_backend: str = "memory"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    initial_status_policy: str = "random"
    log_level: str = "INFO"


def _choice(name: str, default: str, allowed: tuple[str, ...]) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in allowed:
        raise RuntimeError(
            f"Invalid value for {name}: {value!r}. Expected one of: {', '.join(allowed)}."
        )
    return value


def load_settings() -> Settings:
    """Read settings from the environment."""

    raw_timeout = os.getenv("USER_SERVICE_TIMEOUT", "5.0")
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise RuntimeError(
            f"Invalid value for USER_SERVICE_TIMEOUT: {raw_timeout!r}. Expected seconds as a number."
        ) from None
    if timeout <= 0:
        raise RuntimeError("USER_SERVICE_TIMEOUT must be greater than zero.")

    return Settings(
        user_service_url=os.getenv("USER_SERVICE_URL", "http://localhost:8080/users"),
        user_service_timeout=timeout,
        storage_backend=_choice("SALES_STORAGE_BACKEND", "memory", STORAGE_BACKENDS),
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        initial_status_policy=_choice("INITIAL_STATUS_POLICY", "random", INITIAL_STATUS_POLICY_NAMES),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
