from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field


class ConnectionConfig(BaseModel):
    """Where the event stream lives and how to reconnect to it."""

    host: str = "localhost"
    port: int = 8081
    path: str = "/"
    reconnect_delay: float = 3.0
    manual_reconnect_delay: float = 0.5


class TransportConfig(BaseModel):
    """Transport configuration settings."""

    backend: Literal["websocket", "inmemory"] = "websocket"
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)


class RenderConfig(BaseModel):
    """Rendering surface and animation timings (seconds)."""

    scene: Literal["svg", "inmemory"] = "svg"
    viewport_width: float = 1200
    viewport_height: float = 800
    output_path: Optional[str] = None
    stagger_interval: float = 0.1
    resize_debounce: float = 0.25
    info_reveal_delay: float = 0.5


class StepvizConfig(BaseModel):
    """Top-level configuration model."""

    transport: TransportConfig = Field(default_factory=TransportConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)


def load_config(path: Optional[str] = None) -> StepvizConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to STEPVIZ_CONFIG env
            variable or 'stepviz.yaml' in the current directory.
    """

    config_path = path or os.getenv("STEPVIZ_CONFIG", "stepviz.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = StepvizConfig(**data)
    else:
        config = StepvizConfig()

    env_host = os.getenv("STEPVIZ_HOST")
    if env_host:
        config.transport.connection.host = env_host
    env_port = os.getenv("STEPVIZ_PORT")
    if env_port:
        config.transport.connection.port = int(env_port)
    return config
