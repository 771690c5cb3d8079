"""
settings.py — Central config for the Sanket sign-language demo

Precedence for config values:
1) Streamlit secrets (if available)
2) Environment variables
3) Sensible defaults

All model and media paths derive from PROJECT_ROOT unless given as absolute paths.
Secrets (remote model URLs, tokens) should live in .streamlit/secrets.toml for Streamlit.
"""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

# --- Streamlit secrets (optional) ---
_ST_SECRETS = None
try:
    import streamlit as st  # noqa: F401
    _ST_SECRETS = getattr(st, "secrets", None)
except ImportError:
    _ST_SECRETS = None


# --- Helpers ---------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]  # repo root

def from_secrets_or_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return value from st.secrets[key] if available, else os.getenv(key), else default."""
    if _ST_SECRETS is not None:
        try:
            val = _ST_SECRETS.get(key, None)
            if val is not None:
                return str(val)
        except Exception:
            # st.secrets raises when no secrets.toml exists
            pass
    return os.getenv(key, default)

def as_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse common truthy strings to bool."""
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "t", "yes", "y", "on"}

def as_float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default

def as_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default

def resolve_path(raw: str | Path, *, base: Path = PROJECT_ROOT) -> Path:
    """
    Resolve a filesystem path. If absolute or starts with ~, respect it.
    If relative, resolve under `base`.
    """
    p = Path(raw).expanduser()
    return p if p.is_absolute() else (base / p)

def ensure_dirs(*paths: Path) -> None:
    for p in paths:
        p.mkdir(parents=True, exist_ok=True)


# --- Environment -----------------------------------------------------------

ENVIRONMENT = from_secrets_or_env("ENV", "development")
DEBUG       = as_bool(from_secrets_or_env("DEBUG", "false"), default=False)
LOG_LEVEL   = from_secrets_or_env("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

# "demo" hides the model tools page
APP_MODE = from_secrets_or_env("APP_MODE", "full")

# auto | model | demo | filename
PREDICTION_MODE = from_secrets_or_env("PREDICTION_MODE", "auto").strip().lower()


# --- Model -----------------------------------------------------------------

MODEL_DIR       = resolve_path(from_secrets_or_env("MODEL_DIR", "public/tfjs_model"))
MODEL_JSON_PATH = resolve_path(from_secrets_or_env("MODEL_JSON_PATH", str(MODEL_DIR / "model.json")))
MODEL_BACKUP_NAME = from_secrets_or_env("MODEL_BACKUP_NAME", "model_original.json")

# Weights used for inference; a converted model.json is loadable too
MODEL_PATH   = resolve_path(from_secrets_or_env("MODEL_PATH", str(MODEL_JSON_PATH)))
MODEL_URL    = from_secrets_or_env("MODEL_URL")
MODEL_SHA256 = from_secrets_or_env("MODEL_SHA256")

MODEL_INPUT_SIZE = as_int(from_secrets_or_env("MODEL_INPUT_SIZE"), 224)

DEMO_CONFIDENCE_MIN = 0.75
DEMO_CONFIDENCE_MAX = 0.99


# --- Upload / media --------------------------------------------------------

UPLOAD_PROCESSING_DELAY = as_float(from_secrets_or_env("UPLOAD_PROCESSING_DELAY"), 2.0)
MAX_UPLOAD_MB           = as_int(from_secrets_or_env("MAX_UPLOAD_MB"), 10)

AUDIO_DIR = resolve_path(from_secrets_or_env("AUDIO_DIR", "public/audio"))
TMP_DIR   = resolve_path(from_secrets_or_env("TMP_DIR", "/tmp/sanket"))

API_HOST = from_secrets_or_env("API_HOST", "0.0.0.0")
API_PORT = as_int(from_secrets_or_env("API_PORT"), 8000)


# --- Logging ---------------------------------------------------------------

def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging once; later calls only adjust the level."""
    level_name = (level or LOG_LEVEL or "INFO").upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level_name,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    root.setLevel(level_name)
