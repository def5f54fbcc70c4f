# === FILE: render_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации RenderScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)


class RetryPolicy(BaseModel):
    """Политика повторной навигации для скрейпера календаря."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_attempts: int = Field(2, ge=1, description="Максимальное число попыток навигации.")
    delay: float = Field(1.0, ge=0, description="Фиксированная пауза между попытками (секунд).")
    timeout: float = Field(10.0, gt=0, description="Таймаут одной попытки (секунд).")


class RendererConfig(BaseModel):
    """Конфигурация рендерера, скриншотов и скрейпера."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(1000, ge=1, description="Ширина viewport по умолчанию (px).")
    height: int = Field(1000, ge=1, description="Высота viewport по умолчанию (px).")
    timeout: float = Field(10.0, gt=0, description="Таймаут навигации при рендеринге (секунд).")
    req_headers: Dict[str, str] = Field(
        default_factory=dict, description="Дополнительные HTTP-заголовки для каждого запроса."
    )
    restricted_url_pattern: Optional[str] = Field(
        None, description="Регулярное выражение для блокировки запросов по полному URL."
    )
    close_browser: bool = Field(
        False, description="Закрывать браузер после каждого рендеринга или скриншота."
    )
    headless: bool = Field(True, description="Запускать Chromium без окна.")
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    scheduling_domain: str = Field(
        "calendly.com", min_length=1, description="Ожидаемый домен страницы бронирования."
    )
    settle_delay: float = Field(
        1.0, ge=0, description="Пауза после появления календаря (секунд)."
    )

    @field_validator("restricted_url_pattern")
    def _check_pattern(cls, v: Optional[str]) -> Optional[str]:
        if v:
            try:
                re.compile(v)
            except re.error as exc:
                raise ValueError(f"Некорректное регулярное выражение: {exc}") from exc
        return v or None

    @property
    def timeout_ms(self) -> float:
        return self.timeout * 1000


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


def load_config(path: Union[str, Path, None]) -> RendererConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект RendererConfig.
    Без пути использует configs/default.yaml, а если его нет - значения по умолчанию.
    Явно указанный, но отсутствующий файл приводит к FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return RendererConfig()
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

    try:
        return RendererConfig(**data)
    except ValidationError:
        raise


__all__ = ["RetryPolicy", "RendererConfig", "load_config"]
