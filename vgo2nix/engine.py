# File: vgo2nix/engine.py
"""vgo2nix.engine: Orchestration layer: кеш → перечисление модулей → загрузка → агрегация → deps.nix."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

from vgo2nix.aggregator import aggregate_stream
from vgo2nix.cache import FetchCache
from vgo2nix.config import GeneratorConfig
from vgo2nix.enumerator import enumerate_modules
from vgo2nix.logger import logger
from vgo2nix.manifest import write_manifest
from vgo2nix.models import FetchDescriptor
from vgo2nix.resolver import FetchCoordinator, Prefetcher, RepoRootResolver

__all__ = ["Engine", "generate"]


async def generate(config: GeneratorConfig, cache: Optional[FetchCache] = None) -> List[FetchDescriptor]:
    """Возвращает упорядоченный список дескрипторов для всех зависимостей проекта.

    Ошибка перечисления фатальна всегда; ошибки отдельных модулей фатальны
    только без ``keep_going``.
    """
    if cache is None:
        cache = FetchCache.from_manifest(config.input_path)
    modules = await enumerate_modules(config)
    logger.info("Resolving %d modules with %d jobs", len(modules), min(len(modules), config.jobs))

    async with RepoRootResolver(config) as resolver:
        coordinator = FetchCoordinator(
            resolver=resolver,
            prefetcher=Prefetcher.from_config(config),
            cache=cache,
            jobs=config.jobs,
        )
        return await aggregate_stream(coordinator.resolve_all(modules), config.keep_going)


class Engine:
    """Фасад для CLI: генерация и запись deps.nix по готовому конфигу."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    def run(self) -> Path:
        """Запускает генерацию и сохраняет манифест; возвращает путь до deps.nix."""
        descriptors = asyncio.run(generate(self.config))
        output = write_manifest(descriptors, self.config.output_path, fetch_type=self.config.fetch_type)
        logger.info("Wrote %s", output)
        return output
