"""
Модуль для загрузки и валидации конфигурации A11y Page Checker.
Используется Pydantic для описания схемы и проверки данных.

Ключи принимаются как в snake_case, так и в camelCase (``maxRetries``,
``waitForTimeout``), как в существующих файлах ``a11y-config.yml``.
"""
from __future__ import annotations

import errno
import json
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from a11y_page_checker.errors import ConfigurationError

DEFAULT_AXE_TAGS: tuple[str, ...] = ("wcag2a", "wcag2aa", "wcag21a", "wcag21aa")


class ReportFormat(str, Enum):
    JSON = "json"
    HTML = "html"
    TABLE = "table"


class _Model(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SitemapConfig(_Model):
    """Общие настройки загрузки: таймаут, повторы, параллелизм, ожидание."""

    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос или навигацию (секунд).")
    max_retries: int = Field(3, ge=0, description="Число повторных попыток после первой неудачи.")
    concurrent: int = Field(2, ge=1, description="Размер пачки / пула страниц.")
    wait_for_timeout: float = Field(
        5.0, ge=0, description="Пауза между повторами и пачками sitemap (секунд)."
    )


class TesterConfig(SitemapConfig):
    """Настройки аудита: ``wait_for_timeout`` здесь означает ожидание после загрузки страницы."""

    wait_for_timeout: float = Field(
        0.0, ge=0, description="Дополнительное ожидание перед проверкой (секунд)."
    )


class WebsiteCrawlerConfig(SitemapConfig):
    """Настройки обхода сайта по ссылкам."""

    base_url: HttpUrl = Field(..., description="Корневой URL для обхода.")
    max_depth: int = Field(3, ge=0, description="Максимальная глубина обхода ссылок.")
    max_pages: Optional[int] = Field(None, ge=1, description="Лимит страниц (None: без лимита).")
    exclude_patterns: List[str] = Field(default_factory=list)
    include_patterns: List[str] = Field(default_factory=list)

    @field_validator("base_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @field_validator("exclude_patterns", "include_patterns")
    def _check_patterns_compile(cls, v: List[str]) -> List[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
        return v

    @property
    def base(self) -> str:
        return str(self.base_url).rstrip("/")


class AxeConfig(_Model):
    tags: List[str] = Field(default_factory=lambda: list(DEFAULT_AXE_TAGS), min_length=1)
    rules: Optional[List[str]] = None


class OutputConfig(_Model):
    formats: List[ReportFormat] = Field(default_factory=lambda: [ReportFormat.JSON])
    directory: Path = Path("a11y-reports")


class AuditConfig(_Model):
    """Конфигурация одного запуска аудита."""

    sitemaps: Dict[str, str] = Field(default_factory=dict, description="Имя sitemap -> URL или путь.")
    website: Optional[WebsiteCrawlerConfig] = None
    crawler: SitemapConfig = Field(default_factory=SitemapConfig)
    tester: TesterConfig = Field(default_factory=TesterConfig)
    axe: AxeConfig = Field(default_factory=AxeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @model_validator(mode="after")
    def _check_source(self) -> AuditConfig:
        if not self.sitemaps and self.website is None:
            raise ValueError("either 'sitemaps' or 'website' must be configured")
        return self


_DEFAULT_CFG = Path("a11y-config.yml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Неправильный YAML в {path}: {exc}", "PARSE_ERROR") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Неправильный JSON в {path}: {exc}", "PARSE_ERROR") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> AuditConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект AuditConfig.
    При отсутствии файла конфига бросает FileNotFoundError,
    при ошибке схемы бросает pydantic.ValidationError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ConfigurationError(f"Неподдерживаемый формат конфига: {suffix}", "UNSUPPORTED_FORMAT")

    return AuditConfig.model_validate(data)


__all__ = [
    "DEFAULT_AXE_TAGS",
    "ReportFormat",
    "SitemapConfig",
    "TesterConfig",
    "WebsiteCrawlerConfig",
    "AxeConfig",
    "OutputConfig",
    "AuditConfig",
    "load_config",
]
