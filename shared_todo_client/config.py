"""Loading and validation of the client configuration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_API_URL = "http://localhost:5000/api"
API_URL_ENV = "TODO_API_URL"


class ApiSettings(BaseModel):
    """Connection settings for the to-do REST API."""

    base_url: str = Field(
        default_factory=lambda: os.environ.get(API_URL_ENV, DEFAULT_API_URL),
        description="Base URL of the API, for example http://localhost:5000/api",
    )
    timeout: float = Field(10.0, gt=0, description="Per-request timeout in seconds")


class StorageSettings(BaseModel):
    """Where the bearer token is persisted between runs."""

    path: Path = Field(
        Path.home() / ".shared_todo" / "state.sqlite",
        description="SQLite file holding the local key/value storage",
    )
    token_key: str = Field("token", min_length=1, description="Storage key of the bearer token")

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: Path | str) -> Path:
        return Path(value).expanduser()


class SearchOptions(BaseModel):
    """Collaborator lookup parameters."""

    min_query_length: int = Field(2, ge=0, description="Shorter queries are answered locally with no results")


class AppConfig(BaseModel):
    """Root configuration of the client."""

    api: ApiSettings = Field(default_factory=ApiSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    search: SearchOptions = Field(default_factory=SearchOptions)

    @classmethod
    def load(cls, path: Path | str) -> "AppConfig":
        """Loads the configuration from a YAML file."""
        path = Path(path)
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Configuration {path} is invalid: {exc}") from exc

    @classmethod
    def load_or_default(cls, path: Optional[Path | str]) -> "AppConfig":
        """Like :meth:`load`, but falls back to defaults when the file does not exist."""
        if path is None or not Path(path).exists():
            return cls()
        return cls.load(path)

    def ensure_runtime_dirs(self) -> None:
        """Creates the directory of the state file if missing."""
        self.storage.path.parent.mkdir(parents=True, exist_ok=True)


__all__ = ["AppConfig", "ApiSettings", "StorageSettings", "SearchOptions", "DEFAULT_API_URL", "API_URL_ENV"]
