"""
The K-best memoisation table of the edit-distance dynamic program.

Each cell ``(row, col)`` holds up to K entries describing the best alignments of
``a[:row]`` with ``b[:col]``. An entry stores its distance, the operation that
produced it and the rank of the entry it extends in the predecessor cell, so any
entry can be expanded back into a full alignment.

The cells are stored as an arena: three flat structure-of-arrays buffers shared by
all cells, plus CSR offsets indexed by the flat cell number ``row * cols + col``.
"""
from enum import IntEnum
from typing import NamedTuple, Final

import numpy as np

from editk.utils import RaggedBatch
from editk.utils.resources import INDEX_DTYPE, jit
from editk.core.select import Selector


# Constants ------------------------------------------------------------------------------------------------------------
class Op(IntEnum):
    """Operation producing a cell entry from its predecessor."""
    ORIGIN = 0  # Cell (0, 0), no predecessor
    INSERTION = 1  # Consumes a[row-1], predecessor at (row-1, col)
    DELETION = 2  # Consumes b[col-1], predecessor at (row, col-1)
    SUBSTITUTION = 3  # Consumes both, predecessor at (row-1, col-1)


INSERTION_COST: Final = 1
DELETION_COST: Final = 1
SUBSTITUTION_COST: Final = 1
OP_DTYPE: Final = np.uint8

_ORIGIN: Final = int(Op.ORIGIN)
_INSERTION: Final = int(Op.INSERTION)
_DELETION: Final = int(Op.DELETION)
_SUBSTITUTION: Final = int(Op.SUBSTITUTION)
_BLOCK_OPS: Final = np.array([_INSERTION, _DELETION, _SUBSTITUTION], dtype=OP_DTYPE)


# Classes --------------------------------------------------------------------------------------------------------------
class CellEntry(NamedTuple):
    """One of the K best sub-alignments ending at a cell."""
    distance: int
    op: Op
    rank: int


class Table(RaggedBatch):
    """
    Arena-backed (|a|+1) x (|b|+1) grid of K-best cells.

    Use :meth:`Table.build` to fill one; the buffers are read-only afterwards.

    Examples:
        >>> from editk.core.alphabet import encode
        >>> table = Table.build(encode('TGCA'), encode('TCTA'), 10, Selector())
        >>> table.terminal[0]
        CellEntry(distance=2, op=<Op.SUBSTITUTION: 3>, rank=0)
    """
    __slots__ = ('_rows', '_cols', '_k', '_distances', '_ops', '_ranks')
    def __init__(self, rows: int, cols: int, k: int, offsets: np.ndarray):
        super().__init__(offsets)
        self._rows = rows
        self._cols = cols
        self._k = k
        n = self.total
        self._distances = np.zeros(n, dtype=INDEX_DTYPE)
        self._ops = np.zeros(n, dtype=OP_DTYPE)
        self._ranks = np.zeros(n, dtype=INDEX_DTYPE)

    def __repr__(self): return f"Table({self._rows}x{self._cols}, k={self._k}, entries={self.total})"

    @classmethod
    def empty(cls, n_rows: int, n_cols: int, k: int) -> 'Table':
        """Allocates the arena for an ``n_rows`` x ``n_cols`` grid (boundary included)."""
        if k < 1: raise ValueError(f'k must be at least 1, got {k}')
        sizes = _cell_sizes_kernel(n_rows, n_cols, k)
        return cls(n_rows, n_cols, k, cls.offsets_from_sizes(sizes.ravel()))

    @classmethod
    def build(cls, a: np.ndarray, b: np.ndarray, k: int, selector: Selector) -> 'Table':
        """
        Fills the table for the code arrays ``a`` and ``b`` in row-major order.

        Args:
            a: Encoded first sequence (rows).
            b: Encoded second sequence (columns).
            k: Number of entries kept per cell.
            selector: K-smallest selection strategy.

        Returns:
            The filled, read-only table.
        """
        table = cls.empty(len(a) + 1, len(b) + 1, k)
        table._fill_boundary()
        for row in range(1, table._rows):
            a_code = a[row - 1]
            for col in range(1, table._cols):
                sub_cost = 0 if a_code == b[col - 1] else SUBSTITUTION_COST
                distances, ops, ranks = candidates(table, row, col, sub_cost)
                chosen = selector(distances, k)
                start, stop = table.span(table.index(row, col))
                table._distances[start:stop] = distances[chosen]
                table._ops[start:stop] = ops[chosen]
                table._ranks[start:stop] = ranks[chosen]
        for arr in (table._distances, table._ops, table._ranks): arr.flags.writeable = False
        assert table.is_sorted(table._rows - 1, table._cols - 1)
        return table

    def _fill_boundary(self):
        start, _ = self.span(0)
        self._ops[start] = _ORIGIN
        for row in range(1, self._rows):
            start, _ = self.span(self.index(row, 0))
            self._distances[start] = row * INSERTION_COST
            self._ops[start] = _INSERTION
        for col in range(1, self._cols):
            start, _ = self.span(self.index(0, col))
            self._distances[start] = col * DELETION_COST
            self._ops[start] = _DELETION

    # --- Accessors ---
    @property
    def shape(self) -> tuple[int, int]: return self._rows, self._cols
    @property
    def k(self) -> int: return self._k
    @property
    def arrays(self): return self._offsets, self._distances, self._ops, self._ranks

    def index(self, row: int, col: int) -> int:
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            raise IndexError(f'Cell ({row}, {col}) outside a {self._rows}x{self._cols} table')
        return row * self._cols + col

    def distances(self, row: int, col: int) -> np.ndarray:
        start, stop = self.span(self.index(row, col))
        return self._distances[start:stop]

    def cell(self, row: int, col: int) -> tuple[CellEntry, ...]:
        start, stop = self.span(self.index(row, col))
        return tuple(CellEntry(int(d), Op(int(o)), int(r)) for d, o, r in
                     zip(self._distances[start:stop], self._ops[start:stop], self._ranks[start:stop]))

    def __getitem__(self, item) -> tuple[CellEntry, ...]:
        if isinstance(item, tuple): return self.cell(*item)
        item = int(item)
        if item < 0: item += len(self)
        return self.cell(*divmod(item, self._cols))

    @property
    def terminal(self) -> tuple[CellEntry, ...]:
        """The entries of cell (|a|, |b|), best first."""
        return self.cell(self._rows - 1, self._cols - 1)

    def is_sorted(self, row: int, col: int) -> bool:
        d = self.distances(row, col)
        return bool(np.all(d[1:] >= d[:-1]))

    def traceback(self, rank: int, a: np.ndarray, b: np.ndarray, gap: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Rebuilds the alignment of terminal entry ``rank`` by following predecessor links.

        Returns:
            The aligned first sequence, aligned second sequence and common sequence as
            code arrays, with ``gap`` marking gaps and mismatches.
        """
        start, stop = self.span(len(self) - 1)
        if not 0 <= rank < stop - start: raise IndexError(f'Terminal cell has no entry of rank {rank}')
        return _traceback_kernel(a, b, self._offsets, self._ops, self._ranks, self._cols, start + rank, gap)


# Functions ------------------------------------------------------------------------------------------------------------
def candidates(table: Table, row: int, col: int, sub_cost: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Generates the extension candidates of interior cell ``(row, col)``.

    Candidates come in three blocks, insertions from the cell above, deletions from
    the cell to the left and substitutions from the diagonal, each in ascending
    predecessor rank. This order is the tie-break used by the selectors.

    Returns:
        Parallel arrays of distances, operations and predecessor ranks.
    """
    up = table.distances(row - 1, col)
    left = table.distances(row, col - 1)
    diag = table.distances(row - 1, col - 1)
    sizes = (len(up), len(left), len(diag))
    distances = np.concatenate((up + INSERTION_COST, left + DELETION_COST, diag + sub_cost))
    ops = np.repeat(_BLOCK_OPS, sizes)
    ranks = np.concatenate([np.arange(n, dtype=INDEX_DTYPE) for n in sizes])
    return distances, ops, ranks


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True)
def _cell_sizes_kernel(n_rows, n_cols, k):
    # Sizes only depend on the grid shape, not on the characters
    sizes = np.ones((n_rows, n_cols), dtype=np.int64)
    for row in range(1, n_rows):
        for col in range(1, n_cols):
            n = sizes[row - 1, col] + sizes[row, col - 1] + sizes[row - 1, col - 1]
            sizes[row, col] = n if n < k else k
    return sizes


@jit(nopython=True, cache=True, nogil=True)
def _traceback_kernel(a, b, offsets, ops, ranks, n_cols, entry, gap):
    row = len(a)
    col = len(b)
    n = row + col
    out_a = np.empty(n, dtype=np.int32)
    out_b = np.empty(n, dtype=np.int32)
    out_common = np.empty(n, dtype=np.int32)
    pos = 0
    while row > 0 or col > 0:
        op = ops[entry]
        if op == _INSERTION:
            row -= 1
            out_a[pos] = a[row]; out_b[pos] = gap; out_common[pos] = gap
        elif op == _DELETION:
            col -= 1
            out_a[pos] = gap; out_b[pos] = b[col]; out_common[pos] = gap
        else:
            row -= 1
            col -= 1
            out_a[pos] = a[row]; out_b[pos] = b[col]
            out_common[pos] = a[row] if a[row] == b[col] else gap
        pos += 1
        entry = offsets[row * n_cols + col] + ranks[entry]
    return out_a[:pos][::-1].copy(), out_b[:pos][::-1].copy(), out_common[:pos][::-1].copy()
