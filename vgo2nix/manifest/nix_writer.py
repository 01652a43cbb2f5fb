# File: vgo2nix/manifest/nix_writer.py
"""vgo2nix.manifest.nix_writer: Генерация deps.nix с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from vgo2nix.models import FetchDescriptor
from vgo2nix.utils import escape_nix_string

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "deps.nix.j2"
HEADER = "# file generated from go.mod using vgo2nix (https://github.com/adisbladis/vgo2nix)"


def _environment(template_dir: Union[Path, str]) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )
    env.filters["nix"] = escape_nix_string
    return env


def render_manifest(
    descriptors: Sequence[FetchDescriptor],
    *,
    fetch_type: str = "git",
    template_dir: Union[Path, str] = TEMPLATE_DIR,
) -> str:
    """Рендерит deps.nix для уже упорядоченного списка дескрипторов.

    Args:
        descriptors: дескрипторы, отсортированные агрегатором по import path.
        fetch_type: значение `fetch.type` для каждой записи.
        template_dir: директория с шаблоном deps.nix.j2.

    Returns:
        Текст манифеста; одинаковый вход всегда даёт байт-в-байт одинаковый результат.
    """
    template = _environment(template_dir).get_template(TEMPLATE_NAME)
    context: dict[str, Any] = {
        "header": HEADER,
        "fetch_type": fetch_type,
        "packages": descriptors,
    }
    return template.render(**context)


def write_manifest(
    descriptors: Sequence[FetchDescriptor],
    output_path: Union[Path, str],
    *,
    fetch_type: str = "git",
) -> Path:
    """Сохраняет deps.nix по указанному пути и возвращает Path до файла.

    Пример:
    ```python
    from vgo2nix.manifest import write_manifest
    path = write_manifest(descriptors, 'deps.nix')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    content = render_manifest(descriptors, fetch_type=fetch_type)
    with output.open("w", encoding="utf-8", newline="\n") as f:
        f.write(content)
    return output
