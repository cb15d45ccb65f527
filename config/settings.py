"""
Configuration management for the Project Log service.

This module provides centralized configuration management with:
- Environment-specific settings
- Type validation and defaults
- The static project registry scanned by the service
- Logging and git invocation options
"""

import os
from types import MappingProxyType
from typing import Optional, List, Dict, Any, Mapping
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import BaseSettings as PydanticBaseSettings

from shared.models import ProjectRegistration


class ProjectConfig(BaseModel):
    """A single registered project as it appears in configuration."""

    name: str = Field(..., min_length=1, description="Display name")
    path: str = Field(..., min_length=1, description="Filesystem path of the checkout")

    model_config = {"frozen": True}

    @field_validator("path")
    @classmethod
    def expand_path(cls, v):
        return os.path.expanduser(v)


DEFAULT_PROJECTS: Dict[str, Dict[str, str]] = {
    "project-organization": {
        "name": "Project Organization",
        "path": "~/Documents/my_project/project summary",
    },
    "english-learning-tts": {
        "name": "English Learning TTS",
        "path": "~/Documents/my_project/english-learning",
    },
    "chiang-mai-activities": {
        "name": "Chiang Mai Activities",
        "path": "~/Documents/my_project/Chiengmai",
    },
    "aisaas-video": {
        "name": "AI SaaS Video",
        "path": "~/Documents/my_project/aisaasvideo",
    },
    "clawdbot-railway": {
        "name": "Clawdbot Railway Template",
        "path": "~/Documents/my_project/clawdbot-railway-template",
    },
    "skills-development": {
        "name": "Skills Development",
        "path": "~/Documents/my_project/skills",
    },
}


class SecuritySettings(BaseSettings):
    """Security configuration settings."""

    cors_origins: List[str] = Field(default=["*"], description="CORS allowed origins")


class MonitoringSettings(BaseSettings):
    """Logging configuration settings."""

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class ServiceSettings(BaseSettings):
    """HTTP service configuration settings."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3003, ge=1, le=65535, description="Project log service port")
    reload: bool = Field(default=False, description="Reload on code changes")
    request_timeout: int = Field(default=30, description="CLI HTTP request timeout")


class GitSettings(BaseSettings):
    """Git invocation settings."""

    lookback_days: int = Field(
        default=1, ge=0, description="Days before the target date where the scan window starts"
    )
    command_timeout: Optional[float] = Field(
        default=None, gt=0, description="Seconds before a git command is killed"
    )


class Settings(PydanticBaseSettings):
    """
    Main application settings with environment-specific configuration.

    Supports multiple environments:
    - development: Local development settings
    - testing: Test environment settings
    - staging: Staging environment settings
    - production: Production environment settings

    The project registry can be replaced wholesale by setting ``PROJECTS`` to a
    JSON object of ``{"<id>": {"name": ..., "path": ...}}``.
    """

    app_name: str = Field(default="Project Log", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")

    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    git: GitSettings = Field(default_factory=GitSettings)

    projects: Dict[str, ProjectConfig] = Field(
        default_factory=lambda: {
            project_id: ProjectConfig(**data) for project_id, data in DEFAULT_PROJECTS.items()
        },
        description="Registered projects keyed by identifier",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        valid_environments = ["development", "testing", "staging", "production"]
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v

    @field_validator("debug")
    @classmethod
    def validate_debug_mode(cls, v, info):
        if info.data.get("environment") == "production" and v:
            raise ValueError("Debug mode cannot be enabled in production")
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "extra": "ignore"
    }

    def project_registry(self) -> Mapping[str, ProjectRegistration]:
        """Build the read-only registry, preserving configuration order."""
        return MappingProxyType(
            {
                project_id: ProjectRegistration(id=project_id, name=cfg.name, path=cfg.path)
                for project_id, cfg in self.projects.items()
            }
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration object

    Example:
        >>> settings = get_settings()
        >>> print(settings.service.port)
        >>> print(list(settings.projects))
    """
    return Settings()


# Global settings instance
settings = get_settings()


def export_config() -> Dict[str, Any]:
    """
    Export configuration for external tools and monitoring.

    Returns:
        Dict[str, Any]: Configuration export (without filesystem paths)
    """
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "monitoring": {
            "log_level": settings.monitoring.log_level,
        },
        "service": {
            "host": settings.service.host,
            "port": settings.service.port,
        },
        "git": {
            "lookback_days": settings.git.lookback_days,
            "command_timeout": settings.git.command_timeout,
        },
        "projects": {project_id: cfg.name for project_id, cfg in settings.projects.items()},
    }


if __name__ == "__main__":
    """Print the effective configuration."""
    import json

    print("Configuration Export:")
    print(json.dumps(export_config(), indent=2))
