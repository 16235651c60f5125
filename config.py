# Single config layer: Streamlit secrets first, then env, then defaults.

import os
from typing import Dict, List

import constants
from errors import ConfigError

REQUIRED_KEYS = ("ai_api_url", "ai_api_key", "ai_model")

_ENV_NAMES = {
    "ai_api_url": "AI_API_URL",
    "ai_api_key": "AI_API_KEY",
    "ai_model": "AI_MODEL",
}


def _get_secrets():
    try:
        import streamlit as st
        return getattr(st, "secrets", None) or {}
    except Exception:
        return {}


def _read(secrets, name: str, default: str = "") -> str:
    try:
        value = secrets.get(name)
    except Exception:
        # st.secrets raises when no secrets.toml exists
        value = None
    if value in (None, ""):
        value = os.environ.get(name, default)
    return str(value or "").strip()


def get_config() -> Dict[str, str]:
    """Return app config: st.secrets > env vars > defaults."""
    s = _get_secrets()
    return {
        "ai_api_url": _read(s, _ENV_NAMES["ai_api_url"]).rstrip("/"),
        "ai_api_key": _read(s, _ENV_NAMES["ai_api_key"]),
        "ai_model": _read(s, _ENV_NAMES["ai_model"], constants.DEFAULT_AI_MODEL),
    }


def missing_config_keys(cfg: Dict[str, str]) -> List[str]:
    """Names of the environment variables whose values are absent from *cfg*."""
    return [_ENV_NAMES[k] for k in REQUIRED_KEYS if not cfg.get(k)]


def require_ai_config() -> Dict[str, str]:
    """Return the config, raising ConfigError when a required value is absent."""
    cfg = get_config()
    missing = missing_config_keys(cfg)
    if missing:
        raise ConfigError(f"AI 接口配置缺失：{', '.join(missing)}（请在 secrets 或环境变量中设置）")
    return cfg
