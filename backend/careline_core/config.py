from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

_ENV_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_BACKEND_DIR = Path(__file__).resolve().parents[1]

MODEL_PROVIDERS = ("gemini", "anthropic", "openai")


def load_local_env_file(path: Path) -> None:
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not _ENV_KEY_RE.fullmatch(key):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ.setdefault(key, value)


def bootstrap_local_env() -> None:
    for candidate in (_BACKEND_DIR.parent / ".env", _BACKEND_DIR / ".env"):
        if candidate.exists():
            load_local_env_file(candidate)


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class ProviderConfig:
    provider: str
    base_url: str
    api_key: str
    model: str
    api_version: str | None = None


@dataclass(frozen=True)
class Settings:
    db_path: str
    provider_preference: str = "auto"
    providers: dict[str, ProviderConfig] = field(default_factory=dict)
    model_timeout_seconds: float = 25.0
    alignment_latin_ratio: float = 1.2
    emergency_number: str = "112"
    log_level: str = "INFO"
    allowed_origins: tuple[str, ...] = ("http://localhost:3000",)

    @classmethod
    def from_env(cls) -> "Settings":
        providers: dict[str, ProviderConfig] = {}
        gemini_key = _env_str("GEMINI_API_KEY")
        if gemini_key:
            providers["gemini"] = ProviderConfig(
                provider="gemini",
                base_url=_env_str("GEMINI_API_BASE_URL", "https://generativelanguage.googleapis.com/v1beta").rstrip("/"),
                api_key=gemini_key,
                model=_env_str("GEMINI_MODEL", "gemini-2.5-flash"),
            )
        anthropic_key = _env_str("ANTHROPIC_API_KEY")
        if anthropic_key:
            model = _env_str("ANTHROPIC_MODEL", "claude-3-5-sonnet-latest")
            # OpenRouter-style names ("anthropic/claude-...") are not valid on the native API.
            if model.startswith("anthropic/"):
                model = model.split("/", 1)[1]
            providers["anthropic"] = ProviderConfig(
                provider="anthropic",
                base_url=_env_str("ANTHROPIC_API_BASE_URL", "https://api.anthropic.com/v1").rstrip("/"),
                api_key=anthropic_key,
                model=model,
                api_version=_env_str("ANTHROPIC_API_VERSION", "2023-06-01"),
            )
        openai_key = _env_str("OPENAI_API_KEY")
        if openai_key:
            providers["openai"] = ProviderConfig(
                provider="openai",
                base_url=_env_str("OPENAI_API_BASE_URL", "https://api.openai.com/v1").rstrip("/"),
                api_key=openai_key,
                model=_env_str("OPENAI_MODEL", "gpt-4o-mini"),
            )

        origins = tuple(
            origin.strip()
            for origin in _env_str("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        )
        return cls(
            db_path=_env_str("CARELINE_DB_PATH", str(_BACKEND_DIR / "careline.sqlite")),
            provider_preference=_env_str("CARELINE_MODEL_PROVIDER", "auto").lower(),
            providers=providers,
            model_timeout_seconds=_env_float("CARELINE_MODEL_TIMEOUT_SECONDS", 25.0),
            alignment_latin_ratio=_env_float("CARELINE_ALIGNMENT_LATIN_RATIO", 1.2),
            emergency_number=_env_str("CARELINE_EMERGENCY_NUMBER", "112"),
            log_level=_env_str("CARELINE_LOG_LEVEL", "INFO").upper(),
            allowed_origins=origins,
        )

    def selected_provider(self) -> ProviderConfig | None:
        if self.provider_preference == "none":
            return None
        if self.provider_preference in MODEL_PROVIDERS:
            return self.providers.get(self.provider_preference)
        for name in MODEL_PROVIDERS:
            if name in self.providers:
                return self.providers[name]
        return None


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
