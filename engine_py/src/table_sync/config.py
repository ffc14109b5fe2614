"""Client configuration"""

import os
from dataclasses import dataclass

from .constants import (
    DEFAULT_HOST, DEFAULT_OPEN_TIMEOUT, DEFAULT_PATH, DEFAULT_PORT, DEFAULT_SCHEME,
)


@dataclass
class ClientConfig:
    scheme: str = DEFAULT_SCHEME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    path: str = DEFAULT_PATH
    open_timeout: float = DEFAULT_OPEN_TIMEOUT
    log_level: str = "info"

    @property
    def url(self) -> str:
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        return f"{self.scheme}://{self.host}:{self.port}{path}"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            scheme=os.getenv("TABLE_SYNC_SCHEME", DEFAULT_SCHEME),
            host=os.getenv("TABLE_SYNC_HOST", DEFAULT_HOST),
            port=int(os.getenv("TABLE_SYNC_PORT", DEFAULT_PORT)),
            path=os.getenv("TABLE_SYNC_PATH", DEFAULT_PATH),
            open_timeout=float(os.getenv("TABLE_SYNC_OPEN_TIMEOUT", DEFAULT_OPEN_TIMEOUT)),
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
        )
