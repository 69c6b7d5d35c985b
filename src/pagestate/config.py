# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Engine configuration.

Passed explicitly to the API client, text store, and CLI. The engine itself
never reads environment variables; only ``from_env()`` does.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass, replace
from pathlib import Path

from .errors import ConfigError

DEFAULT_TIMEOUT = 10.0
_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Backend endpoints, theme location, and logging options."""

    api_base_url: str = ""
    ajax_base_url: str = ""  # storefront AJAX API (cart); defaults to api_base_url
    api_token: str = ""
    theme_dir: Path | None = None
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    json_logs: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        env = os.environ if environ is None else environ
        config = cls(
            api_base_url=env.get("PAGESTATE_API_URL", "").strip(),
            ajax_base_url=env.get("PAGESTATE_AJAX_URL", "").strip(),
            api_token=env.get("PAGESTATE_API_TOKEN", "").strip(),
            log_level=env.get("PAGESTATE_LOG_LEVEL", "").strip() or "INFO",
            json_logs=env.get("PAGESTATE_JSON_LOGS", "").strip().lower() in _TRUTHY,
        )
        theme_dir = env.get("THEME_DIR", "").strip()
        if theme_dir:
            config = replace(config, theme_dir=Path(theme_dir))
        env_timeout = env.get("PAGESTATE_TIMEOUT", "").strip()
        if env_timeout:
            with suppress(ValueError):
                config = replace(config, timeout=float(env_timeout))
        return config

    def with_overrides(self, **changes) -> EngineConfig:
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def validate(self, *, require_theme: bool = True) -> EngineConfig:
        """Raise ConfigError when the engine cannot run with this configuration."""
        if not self.api_base_url:
            raise ConfigError("API base URL is not configured (PAGESTATE_API_URL or --api-url)")
        if require_theme and self.theme_dir is None:
            raise ConfigError("Theme directory is not configured (THEME_DIR or --theme-dir)")
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        return self

    @property
    def cart_base_url(self) -> str:
        return self.ajax_base_url or self.api_base_url
