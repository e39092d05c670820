"""
描述: MCP Server 全局配置加载器
主要功能:
    - 统一管理 Evolution API 网关配置
    - 支持 YAML 文件加载与环境变量覆盖
    - 提供 Evolution 连接参数 (API Key / 实例 / Base URL)
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from evolution_mcp.errors import ConfigurationError


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")

DEFAULT_API_BASE = "localhost:8080"


# region 基础配置模型
class ServerSettings(BaseModel):
    """服务监听配置"""
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False


class EvolutionSettings(BaseModel):
    """Evolution API 连接配置 (进程级只读)"""
    api_key: str = ""
    instance: str = ""
    api_base: str = DEFAULT_API_BASE
    api_scheme: str = "https"

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("EVOLUTION_APIKEY")
        return self.api_key

    def require_instance(self) -> str:
        if not self.instance:
            raise ConfigurationError("EVOLUTION_INSTANCE")
        return self.instance

    def base_url(self) -> str:
        api_base = (self.api_base or DEFAULT_API_BASE).strip().rstrip("/")
        return f"{self.api_scheme}://{api_base}"


class ToolsSettings(BaseModel):
    enabled: list[str] = Field(default_factory=list)

    def is_enabled(self, name: str) -> bool:
        return not self.enabled or name in self.enabled


class TransportSettings(BaseModel):
    default: str = "stdio"


class LoggingSettings(BaseModel):
    """日志系统配置"""
    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """MCP Server 配置聚合根"""
    server: ServerSettings = Field(default_factory=ServerSettings)
    evolution: EvolutionSettings = Field(default_factory=EvolutionSettings)
    tools: ToolsSettings = Field(default_factory=ToolsSettings)
    transport: TransportSettings = Field(default_factory=TransportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
# endregion


# region 配置加载逻辑
def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            expr = match.group(1)
            if ":-" in expr:
                key, default = expr.split(":-", 1)
                return os.getenv(key, default)
            return os.getenv(expr, "")

        return _ENV_PATTERN.sub(replace, value)
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: _expand_env(val) for key, val in value.items()}
    return value


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return _expand_env(data)


def _set_nested(data: dict[str, Any], keys: list[str], value: Any) -> None:
    current = data
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    current[keys[-1]] = value


def _parse_env_override(env_key: str, env_value: str) -> Any:
    if env_key == "MCP_TOOLS_ENABLED":
        return [item.strip() for item in env_value.split(",") if item.strip()]
    return env_value


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    mapping = {
        "EVOLUTION_APIKEY": ["evolution", "api_key"],
        "EVOLUTION_INSTANCE": ["evolution", "instance"],
        "EVOLUTION_API_BASE": ["evolution", "api_base"],
        "EVOLUTION_API_SCHEME": ["evolution", "api_scheme"],
        "MCP_HOST": ["server", "host"],
        "MCP_PORT": ["server", "port"],
        "MCP_TRANSPORT": ["transport", "default"],
        "MCP_TOOLS_ENABLED": ["tools", "enabled"],
        "LOG_LEVEL": ["logging", "level"],
        "LOG_FORMAT": ["logging", "format"],
    }
    for env_key, path in mapping.items():
        env_value = os.getenv(env_key)
        if env_value is not None and env_value != "":
            _set_nested(data, path, _parse_env_override(env_key, env_value))
    return data


def load_settings(config_path: str | None = None) -> Settings:
    path = Path(config_path or os.getenv("CONFIG_PATH", "config.yaml"))
    data = _load_yaml(path)
    data = _apply_env_overrides(data)
    return Settings.model_validate(data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """获取单例配置对象"""
    return load_settings()
# endregion
