"""
Top-K edit-distance alignment of two sequences.

Generalises the Wagner-Fischer dynamic program from one best value per prefix pair
to the K best values, each remembering the entry it extends, and expands every entry
of the final cell back into an explicit alignment.

The expected runtime is O(M*N*K) with linear-time selection and O(M*N*K*log(K)) with
sort-based selection, M and N being the lengths of the two sequences; memory is
O(M*N*K) because every backtrace may revisit any earlier cell.
"""
from dataclasses import dataclass
from logging import getLogger
from numbers import Integral
from typing import Union, Optional

from numpy.random import Generator

from editk.align.alignment import Alignment
from editk.core.alphabet import DEFAULT_GAP, encode, decode, gap_code, AlphabetError
from editk.core.alphabet import check_gap as _check_gap
from editk.core.select import Selection, Selector
from editk.core.table import Table
from editk.utils import Config
from editk.utils.resources import RESOURCES


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class InvalidArgumentError(ValueError):
    """Raised when the aligner is asked for a non-positive K or given a malformed gap."""


# Constants ------------------------------------------------------------------------------------------------------------
_LOGGER = getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass(slots=True, frozen=True, kw_only=True)
class AlignerConfig(Config):
    """
    Settings of a TopKAligner.

    Attributes:
        k: Number of alignments to return.
        gap: Single gap character, must not occur in the aligned sequences.
        selection: Per-cell selection strategy (member, name or value).
        seed: Seed of the quickselect shuffle; only affects speed, never results.
        check_gap: Reject inputs containing the gap instead of trusting the caller.
        accelerate: Warn if numba is unavailable and kernels run as plain Python.
    """
    k: int = 1
    gap: str = DEFAULT_GAP
    selection: Union[Selection, str, int] = Selection.SORT
    seed: Optional[int] = None
    check_gap: bool = True
    accelerate: bool = False

    def __post_init__(self):
        if isinstance(self.k, bool) or not isinstance(self.k, Integral):
            raise InvalidArgumentError(f'k must be an integer, got {type(self.k).__name__}')
        if self.k < 1: raise InvalidArgumentError(f'k must be at least 1, got {self.k}')
        try: gap_code(self.gap)
        except AlphabetError as e: raise InvalidArgumentError(str(e)) from e
        try: object.__setattr__(self, 'selection', Selection.coerce(self.selection))
        except ValueError as e: raise InvalidArgumentError(str(e)) from e


class TopKAligner:
    """
    Computes the K alignments of smallest edit distance between two strings.

    Examples:
        >>> aligner = TopKAligner(AlignerConfig(k=10))
        >>> [a.edit_distance for a in aligner.align('TGCA', 'TCTA')][:3]
        [2, 2, 3]
    """
    __slots__ = ('_config', '_rng')
    def __init__(self, config: Optional[AlignerConfig] = None, rng: Union[int, Generator, None] = None):
        self._config = config or AlignerConfig()
        self._rng = RESOURCES.rng(self._config.seed if rng is None else rng)
        if self._config.accelerate: RESOURCES.require('numba')

    def __repr__(self): return f"TopKAligner(k={self._config.k}, selection={self._config.selection.name})"

    @property
    def config(self) -> AlignerConfig: return self._config

    def table(self, a: str, b: str) -> Table:
        """Validates the inputs and builds the K-best table without backtracing."""
        return self._build(*self._prepare(a, b))

    def _prepare(self, a: str, b: str):
        if self._config.check_gap: _check_gap(self._config.gap, a, b)
        return encode(a), encode(b)

    def _build(self, a_codes, b_codes) -> Table:
        config = self._config
        selector = Selector(config.selection, self._rng)
        _LOGGER.debug('Building %dx%d table, k=%d, selection=%s', len(a_codes) + 1, len(b_codes) + 1, config.k,
                      selector.strategy.name)
        table = Table.build(a_codes, b_codes, config.k, selector)
        _LOGGER.debug('Built %r', table)
        return table

    def align(self, a: str, b: str) -> list[Alignment]:
        """
        Returns the top-K alignments of ``a`` and ``b``, ordered by edit distance.

        The list is never empty: two empty strings give one empty alignment of
        distance 0.

        Raises:
            GapCollisionError: If ``check_gap`` is set and the gap occurs in ``a`` or ``b``.
        """
        gap = self._config.gap
        a_codes, b_codes = self._prepare(a, b)
        table = self._build(a_codes, b_codes)
        code = gap_code(gap)
        alignments = []
        for rank, entry in enumerate(table.terminal):
            aligned_a, aligned_b, common = table.traceback(rank, a_codes, b_codes, code)
            alignments.append(Alignment(entry.distance, decode(aligned_a), decode(aligned_b), decode(common), gap))
        return alignments


# Functions ------------------------------------------------------------------------------------------------------------
def top_k_alignments(a: str, b: str, k: int, gap: str = DEFAULT_GAP, *,
                     selection: Union[Selection, str, int] = Selection.SORT,
                     rng: Union[int, Generator, None] = None, check_gap: bool = True) -> list[Alignment]:
    """
    Returns the K alignments of ``a`` and ``b`` with the smallest edit distances.

    Args:
        a: First sequence.
        b: Second sequence.
        k: Number of alignments, at least 1.
        gap: Gap character; must not occur in ``a`` or ``b``.
        selection: Per-cell selection strategy. All strategies give identical results.
        rng: Seed or generator for the quickselect shuffle.
        check_gap: If False, the absence of ``gap`` from the inputs is the caller's
            responsibility and is not checked.

    Returns:
        ``min(k, number of alignments)`` alignments, ascending by edit distance.

    Raises:
        InvalidArgumentError: If ``k < 1`` or ``gap`` is not a single character.
        GapCollisionError: If ``check_gap`` is set and the gap occurs in ``a`` or ``b``.

    Examples:
        >>> best = top_k_alignments('TGCA', 'TCTA', 10)
        >>> best[0]
        Alignment(edit_distance=2, aligned_a='TGC_A', aligned_b='T_CTA', common='T_C_A')
    """
    config = AlignerConfig(k=k, gap=gap, selection=selection, check_gap=check_gap)
    return TopKAligner(config, rng=rng).align(a, b)
