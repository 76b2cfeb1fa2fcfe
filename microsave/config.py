"""
Runtime settings, read from the environment (and an optional ``.env`` file).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    def __init__(self):
        self.API_VERSION = os.getenv("MICROSAVE_API_VERSION", "v1")
        self.HOST = os.getenv("MICROSAVE_HOST", "0.0.0.0")
        self.PORT = int(os.getenv("MICROSAVE_PORT", "5477"))
        self.LOG_LEVEL = os.getenv("MICROSAVE_LOG_LEVEL", "INFO").upper()

    @property
    def base_path(self) -> str:
        return f"/blackrock/challenge/{self.API_VERSION}"

    def as_flask_config(self) -> dict:
        return {
            "BASE_PATH": self.base_path,
            "LOG_LEVEL": self.LOG_LEVEL,
        }
