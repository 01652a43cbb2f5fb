# File: vgo2nix/aggregator.py
"""vgo2nix.aggregator: Сборка итогового, детерминированно упорядоченного списка дескрипторов."""

from __future__ import annotations

from typing import AsyncIterable, Dict, Iterable, List

from vgo2nix.errors import AggregationError
from vgo2nix.logger import logger
from vgo2nix.models import FetchDescriptor, FetchOutcome

__all__ = ["Aggregator", "aggregate", "aggregate_stream"]


class Aggregator:
    """Единственное место, где ошибка отдельного модуля становится фатальной."""

    def __init__(self, keep_going: bool = False) -> None:
        self.keep_going = keep_going
        self._by_path: Dict[str, FetchDescriptor] = {}
        self.failures: List[FetchOutcome] = []

    def add(self, outcome: FetchOutcome) -> None:
        """Учитывает один результат; без keep_going первая ошибка прерывает запуск."""
        if outcome.error is not None:
            if not self.keep_going:
                raise AggregationError(outcome.error) from outcome.error
            logger.error("Encountered error: %s", outcome.error)
            self.failures.append(outcome)
            return
        if outcome.descriptor is None:
            raise ValueError(f"outcome for {outcome.import_path} carries neither descriptor nor error")
        self._by_path[outcome.descriptor.import_path] = outcome.descriptor

    def results(self) -> List[FetchDescriptor]:
        """Дескрипторы, отсортированные по import path (стабильный вывод между запусками)."""
        return [self._by_path[path] for path in sorted(self._by_path)]


def aggregate(outcomes: Iterable[FetchOutcome], keep_going: bool = False) -> List[FetchDescriptor]:
    """Собирает готовую коллекцию результатов."""
    agg = Aggregator(keep_going)
    for outcome in outcomes:
        agg.add(outcome)
    return agg.results()


async def aggregate_stream(
    outcomes: AsyncIterable[FetchOutcome], keep_going: bool = False
) -> List[FetchDescriptor]:
    """Собирает результаты по мере поступления от координатора.

    При прерывании асинхронный итератор закрывается явно, чтобы координатор
    дождался уже запущенных загрузок.
    """
    agg = Aggregator(keep_going)
    try:
        async for outcome in outcomes:
            agg.add(outcome)
    finally:
        aclose = getattr(outcomes, "aclose", None)
        if aclose is not None:
            await aclose()
    return agg.results()
