from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


# 项目根目录下的 .env（环境变量优先于 .env）
_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
if _ENV_PATH.exists():
    load_dotenv(_ENV_PATH, override=False)


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name, "").strip()
    return raw or default


def _env_int(name: str, default: int, *, minimum: int = 1) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw, 10)
    except ValueError:
        return default
    return max(minimum, value)


def _env_policy(name: str, default: str) -> str:
    raw = os.getenv(name, "").strip().lower()
    if raw in {"keepalive", "health"}:
        return raw
    return default


@dataclass(frozen=True)
class Settings:
    app_name: str = _env_str("APP_NAME", "NoNap Keep-Warm API")
    app_version: str = _env_str("APP_VERSION", "0.1.0")
    log_level: str = _env_str("LOG_LEVEL", "INFO")

    host: str = _env_str("NONAP_HOST", "0.0.0.0")
    port: int = _env_int("NONAP_PORT", 3030)

    # 初始目标定义（JSON 数组）；文件不存在时以空目标集启动
    targets_file: str = _env_str("TARGETS_FILE", "targets.json")
    history_capacity: int = _env_int("HISTORY_CAPACITY", 100)
    # keepalive: 收到任何响应即成功；health: 状态码 >= 400 记为失败
    success_policy: str = _env_policy("SUCCESS_POLICY", "keepalive")
    default_timeout_ms: int = _env_int("DEFAULT_TIMEOUT_MS", 5000)


settings = Settings()
