from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings

from markuplinks.dispatcher import ALL_DIALECTS, Dialect


class ScanConfig(BaseSettings):
    dialects: list[Dialect] = Field(default_factory=lambda: list(ALL_DIALECTS))
    report_errors: bool = False


class Config(BaseSettings):
    scan_config: ScanConfig = Field(default_factory=ScanConfig)
    strict_mode: bool = False


def load_config(config_dict: dict[str, Any]) -> Config:
    return Config(**config_dict)
