# File: render_scout/report/__init__.py
"""render_scout.report: сохранение результатов (например, карты доступности) в JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union


def render_json(data: Any, path: Union[str, Path], *, pretty: bool = False) -> Path:
    """
    Сериализует data в JSON и сохраняет по указанному пути.

    :param data: JSON-совместимые данные (например, AvailabilityMap)
    :param path: путь к JSON-файлу; родительские папки создаются
    :param pretty: отступ 2 вместо компактного вывода
    :return: Path сохранённого файла
    """
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)
    return output


__all__ = ["render_json"]
