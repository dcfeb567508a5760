"""
Module containing base containers and configuration helpers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Any

import numpy as np

from .resources import INDEX_DTYPE


# Classes --------------------------------------------------------------------------------------------------------------
class Batch(ABC):
    """
    Abstract base class for all batch containers.
    Enforces the Sequence protocol (len, getitem, iter).
    """
    __slots__ = ()
    @abstractmethod
    def __len__(self) -> int: ...
    @abstractmethod
    def __getitem__(self, item): ...
    def __iter__(self):
        for i in range(len(self)): yield self[i]


class RaggedBatch(Batch):
    """
    Base class for batches that store variable-length items in a flattened format (CSR-like).
    Manages the offsets array and length calculation.
    """
    __slots__ = ('_offsets', '_length')
    def __init__(self, offsets: np.ndarray):
        self._offsets = offsets
        self._length = len(offsets) - 1
    def __len__(self) -> int: return self._length

    @staticmethod
    def offsets_from_sizes(sizes: np.ndarray) -> np.ndarray:
        """Returns CSR offsets (length ``len(sizes) + 1``) for a flat array of item sizes."""
        offsets = np.zeros(len(sizes) + 1, dtype=INDEX_DTYPE)
        np.cumsum(sizes, out=offsets[1:])
        return offsets

    def span(self, item: int) -> tuple[int, int]:
        """Returns the ``(start, stop)`` of one item in the flat buffers."""
        if item < 0: item += self._length
        if not 0 <= item < self._length: raise IndexError(f"{self.__class__.__name__} index out of range")
        return int(self._offsets[item]), int(self._offsets[item + 1])

    @property
    def offsets(self) -> np.ndarray: return self._offsets

    @property
    def total(self) -> int:
        """Number of entries across all items."""
        return int(self._offsets[-1])


@dataclass(slots=True, frozen=True, kw_only=True)
class Config:
    """
    Config parent class that can conveniently set attributes from CLI args
    """
    @classmethod
    def from_obj(cls, obj: Any) -> 'Config':
        return cls(**{f.name: val for f in fields(cls) if (val := getattr(obj, f.name, None)) is not None})
