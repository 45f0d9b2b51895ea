"""
Runtime settings.

Defaults live here; environment variables (OMNIVOX_*) override them and
CLI flags override both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) omnivox-lea"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    timeout: float = DEFAULT_TIMEOUT
    verify_tls: bool = True
    user_agent: str = DEFAULT_USER_AGENT


def _parse_bool(value: str, name: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{name} must be one of {sorted(_TRUE | _FALSE)}, got {value!r}")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Raises ValueError for values that cannot be parsed (e.g. a negative timeout).
    """
    env = os.environ if env is None else env

    timeout = DEFAULT_TIMEOUT
    raw_timeout = env.get("OMNIVOX_TIMEOUT", "").strip()
    if raw_timeout:
        timeout = float(raw_timeout)
        if timeout <= 0:
            raise ValueError(f"OMNIVOX_TIMEOUT must be positive, got {raw_timeout!r}")

    verify_tls = True
    raw_verify = env.get("OMNIVOX_VERIFY_TLS", "").strip()
    if raw_verify:
        verify_tls = _parse_bool(raw_verify, "OMNIVOX_VERIFY_TLS")

    user_agent = env.get("OMNIVOX_USER_AGENT", "").strip() or DEFAULT_USER_AGENT

    return Settings(timeout=timeout, verify_tls=verify_tls, user_agent=user_agent)
