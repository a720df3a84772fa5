"""
Модуль для загрузки и валидации конфигурации краулера SiteHealth.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

WaitCondition = Literal["load", "domcontentloaded", "networkidle", "commit"]


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода сайта."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    scheme: Literal["http", "https"] = Field("https", description="Схема для доменов без схемы.")
    max_pages: int = Field(50, ge=1, description="Бюджет обхода: максимум страниц за один запуск.")
    navigation_timeout: float = Field(30.0, gt=0, description="Таймаут навигации одной страницы (секунд).")
    wait_until: WaitCondition = Field("networkidle", description="Условие завершения навигации.")
    headless: bool = Field(True, description="Запуск браузера без окна.")
    user_agent: str = Field("SiteHealthBot/1.0", min_length=1, description="Заголовок User-Agent.")
    sitemap_path: str = Field("/sitemap.xml", description="Путь к sitemap относительно корня сайта.")
    sitemap_discovery: bool = Field(True, description="Использовать sitemap как подсказку для обхода.")
    sitemap_timeout: float = Field(10.0, gt=0, description="Таймаут загрузки sitemap (секунд).")
    follow_links: bool = Field(True, description="Добавлять найденные внутренние ссылки в очередь.")

    @field_validator("sitemap_path", mode="before")
    def _leading_slash(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.startswith("/"):
            return "/" + v
        return v

    @property
    def navigation_timeout_ms(self) -> int:
        return int(self.navigation_timeout * 1000)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.

    Без явного пути используется configs/default.yaml, а если его нет,
    значения по умолчанию. Явно указанный, но отсутствующий файл
    приводит к FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
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
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "WaitCondition", "ValidationError", "load_config"]
