"""配置管理模块。

支持从 .env、config.yaml 以及环境变量加载配置。

优先级（高 → 低）：显式传参 > 环境变量 > .env > config.yaml > secrets 目录。
各 Provider 的 API Key 直接对应常见的环境变量名，例如 OPENAI_API_KEY、
ANTHROPIC_API_KEY、GEMINI_API_KEY、XAI_API_KEY。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("ASSISTANT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
        Path(__file__).resolve().parents[1] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class AssistantSettings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- Provider 凭证 ----
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API 密钥")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API 密钥")
    gemini_api_key: Optional[str] = Field(default=None, description="Google Gemini API 密钥")
    xai_api_key: Optional[str] = Field(default=None, description="xAI Grok API 密钥")

    # ---- 模型与端点（为空时使用 registry 中的默认值）----
    openai_model: Optional[str] = Field(default=None, description="OpenAI 模型 ID")
    anthropic_model: Optional[str] = Field(default=None, description="Anthropic 模型 ID")
    gemini_model: Optional[str] = Field(default=None, description="Gemini 模型 ID")
    grok_model: Optional[str] = Field(default=None, description="Grok 模型 ID")
    openai_base_url: Optional[str] = Field(default=None, description="OpenAI 端点 URL")
    anthropic_base_url: Optional[str] = Field(default=None, description="Anthropic 端点 URL")
    gemini_base_url: Optional[str] = Field(default=None, description="Gemini 端点 URL")
    grok_base_url: Optional[str] = Field(default=None, description="Grok 端点 URL")

    # ---- 回退链 ----
    provider_order: List[str] = Field(
        default_factory=lambda: ["openai", "anthropic", "gemini", "grok"],
        description="远程 Provider 的尝试顺序",
    )
    local_fallback: bool = Field(
        default=True,
        description="是否在链尾挂载本地规则 Provider",
    )

    # ---- 生成参数 ----
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")
    max_tokens: int = Field(default=500, ge=1, description="单次回复的最大 token 数")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="生成温度")

    # ---- 上下文与界面 ----
    context_window: int = Field(default=5, ge=1, le=50, description="话题扫描的最近消息条数")
    metrics_poll_interval: float = Field(default=2.0, gt=0, description="界面刷新指标的间隔（秒）")

    # ---- 存储与日志 ----
    storage_root: str = Field(default=".storage", description="偏好设置存储目录")
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("openai_api_key", "anthropic_api_key", "gemini_api_key", "xai_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if v is not None:
            v = v.strip()
        if v and len(v) < 10:
            # 仍保留该值：Provider 视为可用，调用时由服务端拒绝
            warnings.warn(f"{info.field_name} seems too short")
        return v or None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = AssistantSettings()

# 类型别名，让外部代码可以使用 Settings 类型
Settings = AssistantSettings
