"""Typed configuration loading for the study assistant."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field

DEFAULT_CONFIG_PATH = "configs/app.yaml"


class ModelConfig(BaseModel):
    provider: str = "gemini"
    name: str = "gemini-2.0-flash"
    url: str = "https://generativelanguage.googleapis.com"
    api_key_env: str = "GOOGLE_API_KEY"
    # None leaves the transport default in place
    timeout: Optional[float] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)

    def api_key(self) -> Optional[str]:
        return os.environ.get(self.api_key_env)


class GatewayConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class PromptConfig(BaseModel):
    list_delimiter: str = ", "


class AppConfig(BaseModel):
    name: str = "vidyasagar"
    model: ModelConfig = Field(default_factory=ModelConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    prompts: PromptConfig = Field(default_factory=PromptConfig)


def load_yaml(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_app_config(path: Optional[str] = None) -> AppConfig:
    explicit = path or os.environ.get("VIDYASAGAR_CONFIG")
    config_path = explicit or DEFAULT_CONFIG_PATH
    if not explicit and not Path(config_path).exists():
        return AppConfig()
    data = load_yaml(config_path)
    if "app" not in data:
        raise ValueError(f"Invalid config file, expected 'app' root at {config_path}")
    return AppConfig(**(data["app"] or {}))


def save_config(config: BaseModel, path: str | Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"app": config.model_dump()}, f)
