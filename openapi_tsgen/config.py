"""Generator options and their defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import GenerationError

DEFAULT_CLIENT_NAME = "ApiClient"
DEFAULT_BASE_PATH = "http://127.0.0.1:80"
DEFAULT_TIMEOUT_MS = 5000


@dataclass(frozen=True)
class GenerationOptions:
    """Settings baked into the generated client.

    ``client_name`` names the exported factory, ``base_path`` and
    ``timeout_ms`` become the defaults of the generated configuration.
    """

    client_name: str = DEFAULT_CLIENT_NAME
    base_path: str = DEFAULT_BASE_PATH
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self) -> None:
        if not self.client_name.isidentifier():
            raise GenerationError(f"client name {self.client_name!r} is not a valid identifier")
        if self.timeout_ms <= 0:
            raise GenerationError(f"timeout must be positive, got {self.timeout_ms}")
