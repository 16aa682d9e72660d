"""
Выбор ревьюверов

Работает с уже отфильтрованным списком id и ничего не знает о командах, PR
и базе. Источник случайности передается снаружи (в тестах - random.Random
с seed), выборки выполняются под блокировкой, так что один селектор можно
делить между параллельными запросами.
"""

import random
import threading
from typing import Iterable, Protocol


class ReviewerSelector(Protocol):
    def pick(self, candidates: Iterable[str], n: int) -> list[str]:
        ...

    def pick_one(self, candidates: Iterable[str]) -> str:
        ...


class RandomReviewerSelector:
    """
    Равновероятный выбор без повторений

    pick возвращает min(n, len(set(candidates))) различных id, все
    подмножества такого размера равновероятны.
    """

    def __init__(self, rng: random.Random = None):
        self._rng = rng if rng is not None else random.SystemRandom()
        self._lock = threading.Lock()

    @staticmethod
    def _pool(candidates: Iterable[str]) -> list[str]:
        # Сортировка: с одним seed один и тот же пул дает одну и ту же выборку
        return sorted(set(candidates))

    def pick(self, candidates: Iterable[str], n: int) -> list[str]:
        pool = self._pool(candidates)
        size = min(max(n, 0), len(pool))
        with self._lock:
            return self._rng.sample(pool, size)

    def pick_one(self, candidates: Iterable[str]) -> str:
        pool = self._pool(candidates)
        if not pool:
            raise ValueError('cannot pick from an empty candidate pool')
        with self._lock:
            return self._rng.choice(pool)
