"""
K-smallest selection over the candidates of one table cell.

Every strategy orders candidates by the composite key ``distance * n + position``,
where ``position`` is the candidate's index in generation order. The key is a total
order, so all strategies pick the same k candidates in the same order and only
differ in cost.
"""
from enum import IntEnum
from typing import Union, Callable

import numpy as np
from numpy.random import Generator

from editk.utils.resources import RESOURCES, INDEX_DTYPE, jit


# Constants ------------------------------------------------------------------------------------------------------------
class Selection(IntEnum):
    """Strategy used to keep the k best candidates of a cell."""
    SORT = 0  # Full sort, O(n log n)
    QUICKSELECT = 1  # Shuffled 3-way quickselect, expected O(n)
    INTROSELECT = 2  # numpy.argpartition, O(n)

    @classmethod
    def coerce(cls, value: Union[str, int, 'Selection']) -> 'Selection':
        if isinstance(value, str):
            try: return cls[value.upper()]
            except KeyError: raise ValueError(f'Unknown selection strategy: {value!r}') from None
        return cls(value)


# Classes --------------------------------------------------------------------------------------------------------------
class Selector:
    """
    Callable returning the indices of the k smallest candidates, sorted ascending.

    Args:
        strategy: A Selection member, its name or its value.
        rng: Seed or generator for the quickselect shuffle. Each selector owns its
            generator, there is no process-wide random state.

    Examples:
        >>> select = Selector('quickselect', rng=1)
        >>> select(np.array([3, 1, 2, 1]), 2)
        array([1, 3])
    """
    _REGISTRY: dict[Selection, Callable] = {}

    @classmethod
    def register(cls, strategy: Selection):
        def decorator(func):
            cls._REGISTRY[strategy] = func
            return func
        return decorator

    __slots__ = ('_strategy', '_rng', '_func')
    def __init__(self, strategy: Union[str, int, Selection] = Selection.SORT,
                 rng: Union[int, Generator, None] = None):
        self._strategy = Selection.coerce(strategy)
        self._rng = RESOURCES.rng(rng)
        self._func = self._REGISTRY[self._strategy]

    def __repr__(self): return f"Selector({self._strategy.name})"

    @property
    def strategy(self) -> Selection: return self._strategy

    def __call__(self, distances: np.ndarray, k: int) -> np.ndarray:
        n = len(distances)
        keys = distances.astype(INDEX_DTYPE) * n + np.arange(n, dtype=INDEX_DTYPE)
        if n <= k: return np.argsort(keys)
        chosen = self._func(keys, k, self._rng)
        return chosen[np.argsort(keys[chosen])]


# Strategies -----------------------------------------------------------------------------------------------------------
@Selector.register(Selection.SORT)
def _sort_select(keys: np.ndarray, k: int, rng: Generator) -> np.ndarray:
    return np.argsort(keys)[:k]


@Selector.register(Selection.QUICKSELECT)
def _quick_select(keys: np.ndarray, k: int, rng: Generator) -> np.ndarray:
    # Shuffling first makes the left-most pivot a random one
    order = rng.permutation(len(keys)).astype(INDEX_DTYPE)
    return _quickselect_kernel(keys, order, k)[:k]


@Selector.register(Selection.INTROSELECT)
def _intro_select(keys: np.ndarray, k: int, rng: Generator) -> np.ndarray:
    return np.argpartition(keys, k - 1)[:k]


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True)
def _quickselect_kernel(keys, order, k):
    """
    Hoare's selection with a 3-way partition over an index array.
    On return ``order[:k]`` indexes the k smallest keys (in no particular order).
    """
    target = k - 1
    left = 0
    right = len(order) - 1
    while left < right:
        pivot = keys[order[left]]
        lt = left
        gt = right
        i = left + 1
        # [left, lt) < pivot, [lt, i) == pivot, (gt, right] > pivot
        while i <= gt:
            v = keys[order[i]]
            if v < pivot:
                tmp = order[i]; order[i] = order[lt]; order[lt] = tmp
                lt += 1
                i += 1
            elif v > pivot:
                tmp = order[i]; order[i] = order[gt]; order[gt] = tmp
                gt -= 1
            else:
                i += 1
        if target < lt: right = lt - 1
        elif target > gt: left = gt + 1
        else: break
    return order
