from functools import lru_cache
from typing import Optional
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator

from toolexec.common.config.constants import (
    TOOLCHAIN_ROOT_VAR,
    TOOLCHAIN_PATH_VAR,
    TOOLCHAIN_EXECUTABLE,
    DEFAULT_PRESENTABLE_NAME,
    DEFAULT_READ_CHUNK_SIZE,
)


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TOOLEXEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode flag")
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=True, description="Emit log records as JSON lines")
    log_dir: Optional[str] = Field(default=None)

    toolchain_root: Optional[str] = Field(
        default=None,
        description="Toolchain installation root; falls back to the root variable of the process environment"
    )
    toolchain_path: Optional[str] = Field(
        default=None,
        description="Toolchain module search path; falls back to the search path variable of the process environment"
    )
    root_env_var: str = Field(default=TOOLCHAIN_ROOT_VAR)
    path_env_var: str = Field(default=TOOLCHAIN_PATH_VAR)
    executable_name: str = Field(default=TOOLCHAIN_EXECUTABLE)
    default_title: str = Field(default=DEFAULT_PRESENTABLE_NAME)

    read_chunk_size: int = Field(default=DEFAULT_READ_CHUNK_SIZE, ge=1, le=1048576)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("root_env_var", "path_env_var", "executable_name")
    @classmethod
    def validate_non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value must not be blank")
        return v.strip()

    @model_validator(mode="after")
    def validate_distinct_variables(self) -> "Settings":
        if self.root_env_var == self.path_env_var:
            raise ValueError("Toolchain root and search path variables must differ")
        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()
