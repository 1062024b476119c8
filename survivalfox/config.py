"""Client configuration from the environment.

Values come from process environment variables, optionally seeded from a
``.env`` file in the project root:

    SUPABASE_URL        Project URL (required)
    SUPABASE_ANON_KEY   Public anon key (required)
    RAG_FUNCTION_NAME   Edge function name, default "rag-answer-dev"
    DATA_DIR            On-device storage directory, default ./data
    RAG_TIMEOUT         HTTP timeout in seconds, default 120
    DEVELOPER_MODE      1/true/yes to request developer output; unset = not sent
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from survivalfox.gateway import DEFAULT_FUNCTION_NAME, AnswerGateway

ROOT = Path(__file__).parent.parent
DEFAULT_DATA_DIR = ROOT / "data"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


class Settings(BaseModel):
    supabase_url: str
    supabase_anon_key: str
    function_name: str = DEFAULT_FUNCTION_NAME
    data_dir: Path = DEFAULT_DATA_DIR
    timeout: float = 120.0
    developer_mode: bool | None = None

    def make_gateway(self) -> AnswerGateway:
        return AnswerGateway(
            base_url=self.supabase_url,
            anon_key=self.supabase_anon_key,
            function_name=self.function_name,
            timeout=self.timeout,
        )


def _parse_flag(name: str, raw: str | None) -> bool | None:
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(f"{name} must be a boolean flag, got {raw!r}")


def load_settings(env: Mapping[str, str] | None = None, dotenv_path: Path | None = None) -> Settings:
    """Build Settings from ``env`` (default: os.environ after loading .env)."""
    if env is None:
        load_dotenv(dotenv_path or ROOT / ".env")
        env = os.environ

    url = env.get("SUPABASE_URL", "").strip()
    anon_key = env.get("SUPABASE_ANON_KEY", "").strip()
    if not url or not anon_key:
        raise ConfigError(
            "Supabase config missing: please set SUPABASE_URL and SUPABASE_ANON_KEY "
            "in the environment or in .env"
        )

    raw_timeout = env.get("RAG_TIMEOUT", "").strip()
    try:
        timeout = float(raw_timeout) if raw_timeout else 120.0
    except ValueError as e:
        raise ConfigError(f"RAG_TIMEOUT must be a number of seconds, got {raw_timeout!r}") from e

    data_dir = env.get("DATA_DIR", "").strip()

    return Settings(
        supabase_url=url,
        supabase_anon_key=anon_key,
        function_name=env.get("RAG_FUNCTION_NAME", "").strip() or DEFAULT_FUNCTION_NAME,
        data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        timeout=timeout,
        developer_mode=_parse_flag("DEVELOPER_MODE", env.get("DEVELOPER_MODE")),
    )
