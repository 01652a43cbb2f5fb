# === FILE: vgo2nix/config.py ===
"""
Модуль для загрузки и валидации параметров запуска vgo2nix.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vgo2nix import __version__
from vgo2nix.utils import resolve_against

SENTINEL_HASH = "0sjjj9z1dhilhpc8pq4154czrb79z9cm044jvn75kxcjv6v5l2m5"


class GeneratorConfig(BaseModel):
    """Конфигурация одного запуска генерации deps.nix."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    keep_going: bool = Field(False, description="Продолжать при ошибках отдельных модулей.")
    project_dir: Path = Field(Path("./"), description="Каталог Go-проекта (рабочий каталог для go list).")
    outfile: Path = Field(Path("deps.nix"), description="Выходной файл (относительно project_dir).")
    infile: Path = Field(Path("deps.nix"), description="Предыдущий deps.nix (относительно project_dir).")
    jobs: int = Field(20, ge=1, description="Число параллельных задач.")

    env: Dict[str, str] = Field(
        default_factory=dict, description="Дополнительные переменные окружения для go list."
    )
    list_command: List[str] = Field(
        default_factory=lambda: ["go", "list", "-json", "-m", "all"],
        min_length=1,
        description="Команда, перечисляющая модули.",
    )
    prefetch_command: List[str] = Field(
        default_factory=lambda: ["nix-prefetch-git", "--quiet", "--fetch-submodules"],
        min_length=1,
        description="Команда, вычисляющая sha256 (получает --url и --rev).",
    )
    sentinel_hash: str = Field(SENTINEL_HASH, min_length=1, description="Хеш-признак неудачной загрузки.")
    fetch_type: str = Field("git", min_length=1, description="Тип fetch в deps.nix.")
    resolve_timeout: float = Field(30.0, gt=0, description="Таймаут запроса ?go-get=1 (секунд).")
    resolve_retries: int = Field(2, ge=0, description="Число повторов ?go-get=1 при сетевых ошибках и 5xx.")
    user_agent: str = Field(f"vgo2nix/{__version__}", min_length=1, description="Заголовок User-Agent.")

    @field_validator("list_command", "prefetch_command")
    def _no_empty_arguments(cls, v: List[str]) -> List[str]:
        if not v[0]:
            raise ValueError("команда не может начинаться с пустой строки")
        return v

    @property
    def output_path(self) -> Path:
        return resolve_against(self.project_dir, self.outfile)

    @property
    def input_path(self) -> Path:
        return resolve_against(self.project_dir, self.infile)


_DEFAULT_CFG = Path("vgo2nix.yaml")


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


def load_config(path: Union[str, Path, None]) -> GeneratorConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект GeneratorConfig.
    Без пути использует vgo2nix.yaml из текущего каталога, а если его нет, значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return GeneratorConfig()
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
        return GeneratorConfig(**data)
    except ValidationError:
        raise


def apply_overrides(config: GeneratorConfig, **overrides: Any) -> GeneratorConfig:
    """Возвращает копию конфига с заданными (не None) значениями из CLI."""
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config
    return GeneratorConfig(**{**config.model_dump(), **updates})
