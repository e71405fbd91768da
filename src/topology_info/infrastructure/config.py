"""Configuration management for topology discovery."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from topology_info.domain.value_objects import PATH_DEVICES_SYSTEM_NODE


class SysfsConfig(BaseModel):
    """Sysfs source configuration."""

    root: Path = Field(default=Path("/sys"), description="Root of the sysfs-like tree")
    node_subpath: str = Field(
        default=PATH_DEVICES_SYSTEM_NODE,
        description="NUMA node directory, relative to the root",
    )
    strict_sriov: bool = Field(
        default=False,
        description="Fail discovery on a non-integer sriov_numvfs instead of assuming 0",
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, ge=1, le=65535, description="REST API port")
    metrics_port: int = Field(default=9108, ge=1, le=65535, description="Prometheus metrics port")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="topology_info", description="Service name for tracing")
    trace_console: bool = Field(default=False, description="Also print finished spans to stdout")


class Config(BaseSettings):
    """Main configuration for topology discovery."""

    model_config = SettingsConfigDict(
        env_prefix="TOPOLOGY_INFO_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    sysfs: SysfsConfig = Field(default_factory=SysfsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
