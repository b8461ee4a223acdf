"""PaperLens configuration loader.

Priority (high → low):
  1. CLI flags           (handled at the call site, not in this module)
  2. Environment variables  (PAPERLENS_BACKEND_URL, PAPERLENS_DB)
  3. Per-project paperlens.yaml  (in the working directory)
  4. Global ~/.paperlens/config.yaml  (defaults only, no credentials)
  5. Hardcoded defaults

Global config must never contain API keys or tokens; the backend owns them.
backend.base_url must be an http:// or https:// URL.
All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".paperlens"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "paperlens.yaml"

# Key names that look like credentials; forbidden in global config.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"
    r"|_token$"
    r"|^token$"
    r"|_secret$"
    r"|^secret$"
    r"|passw(?:ord|d)"
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(["backend", "storage", "upload", "chat"])

_LANGUAGE_TAGS: frozenset[str] = frozenset(["en-US", "hi-IN", "mr-IN", "hinglish"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class EndpointsCfg:
    """Backend endpoint paths, relative to backend.base_url."""

    summarize: str = "/api/summarize/"
    insights: str = "/api/insights/"
    search: str = "/api/search/"
    chat: str = "/api/chat/"


@dataclass
class BackendCfg:
    """AI backend connection settings (paperlens.yaml: backend:).

    Attributes:
        base_url: Scheme + host of the inference backend.
        timeout: Per-request timeout in seconds (connect + read).
        endpoints: Path for each of the four artifact operations.
    """

    base_url: str = "http://localhost:8000"
    timeout: float = 120.0
    endpoints: EndpointsCfg = field(default_factory=EndpointsCfg)


@dataclass
class StorageCfg:
    """Local document store (paperlens.yaml: storage:)."""

    path: str = ".paperlens.db"


@dataclass
class UploadCfg:
    """Upload constraints (paperlens.yaml: upload:)."""

    max_bytes: int = 10 * 1024 * 1024


@dataclass
class ChatCfg:
    """Chat prompt settings (paperlens.yaml: chat:).

    Attributes:
        context_chars: Prefix of the document content embedded in the prompt.
        language: Default language tag (en-US, hi-IN, mr-IN or hinglish).
    """

    context_chars: int = 20_000
    language: str = "en-US"


@dataclass
class PaperLensConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    backend: BackendCfg = field(default_factory=BackendCfg)
    storage: StorageCfg = field(default_factory=StorageCfg)
    upload: UploadCfg = field(default_factory=UploadCfg)
    chat: ChatCfg = field(default_factory=ChatCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  Credentials belong to the AI backend, not to PaperLens config.\n"
                        f"  Remove '{full}' from {source.name}."
                    )
                _scan(v, full)

    _scan(data, "")


def _validate_base_url(base_url: str) -> None:
    if not base_url.startswith(("http://", "https://")):
        raise ConfigError(
            f"backend.base_url must be an http:// or https:// URL: '{base_url}'\n"
            "  Example: backend.base_url: http://localhost:8000"
        )


def _validate_language(language: str) -> None:
    if language not in _LANGUAGE_TAGS:
        raise ConfigError(
            f"chat.language must be one of {', '.join(sorted(_LANGUAGE_TAGS))}: '{language}'"
        )


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}'; ignored.",
                UserWarning,
                stacklevel=4,
            )


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> PaperLensConfig:
    """Build a *PaperLensConfig* from a merged raw YAML dict."""
    cfg = PaperLensConfig()

    if "backend" in data:
        b = data["backend"]
        ep = b.get("endpoints", {})
        defaults = cfg.backend.endpoints
        cfg.backend = BackendCfg(
            base_url=str(b.get("base_url", cfg.backend.base_url)),
            timeout=float(b.get("timeout", cfg.backend.timeout)),
            endpoints=EndpointsCfg(
                summarize=str(ep.get("summarize", defaults.summarize)),
                insights=str(ep.get("insights", defaults.insights)),
                search=str(ep.get("search", defaults.search)),
                chat=str(ep.get("chat", defaults.chat)),
            ),
        )

    if "storage" in data:
        s = data["storage"]
        cfg.storage = StorageCfg(path=str(s.get("path", cfg.storage.path)))

    if "upload" in data:
        u = data["upload"]
        cfg.upload = UploadCfg(max_bytes=int(u.get("max_bytes", cfg.upload.max_bytes)))

    if "chat" in data:
        c = data["chat"]
        cfg.chat = ChatCfg(
            context_chars=int(c.get("context_chars", cfg.chat.context_chars)),
            language=str(c.get("language", cfg.chat.language)),
        )

    return cfg


def _apply_env_overrides(cfg: PaperLensConfig) -> PaperLensConfig:
    """Apply PAPERLENS_* environment variable overrides."""
    if url := os.environ.get("PAPERLENS_BACKEND_URL"):
        cfg.backend.base_url = url
    if db := os.environ.get("PAPERLENS_DB"):
        cfg.storage.path = db
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> PaperLensConfig:
    """Load and return a merged *PaperLensConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *paperlens.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *PaperLensConfig* with env var overrides applied.

    Raises:
        ConfigError: If global config contains credential-like fields, if
            ``backend.base_url`` is not an HTTP URL, or if ``chat.language``
            is not a supported tag.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    cfg = _apply_env_overrides(cfg)

    _validate_base_url(cfg.backend.base_url)
    _validate_language(cfg.chat.language)

    return cfg
