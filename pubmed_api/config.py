# pubmed_api/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

LOG_LEVELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "error": "ERROR",
}

DEFAULT_DATA_PATH = "./data/sample_100_pubmed.jsonl"
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@dataclass(frozen=True)
class Settings:
    port: int = 8080
    data_path: str = DEFAULT_DATA_PATH
    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "info"
    request_timeout_s: Optional[float] = 30.0
    root_path: str = ""

    @property
    def logging_level(self) -> str:
        """Level name understood by the stdlib logging module."""
        return LOG_LEVELS[self.log_level]


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env

    log_level = (env.get("LOG_LEVEL") or "info").lower()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"invalid log level: {log_level}")

    # 0 or a negative value disables the per-request deadline
    timeout = float(env.get("REQUEST_TIMEOUT_S") or 30)

    return Settings(
        port=int(env.get("PORT") or 8080),
        data_path=env.get("DATA_PATH") or DEFAULT_DATA_PATH,
        database_url=env.get("DATABASE_URL") or DEFAULT_DATABASE_URL,
        log_level=log_level,
        request_timeout_s=timeout if timeout > 0 else None,
        root_path=env.get("ROOT_PATH", ""),
    )
