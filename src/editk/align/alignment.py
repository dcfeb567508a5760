"""
Module for the alignment records returned by the top-K aligner.
"""
from enum import Enum
from typing import Generator

from editk.core.alphabet import DEFAULT_GAP


# Constants ------------------------------------------------------------------------------------------------------------
class EditOp(Enum):
    """What one alignment column does to turn the first sequence into the second."""
    KEEP = 'Keep'
    SUBSTITUTE = 'Substitute'
    INSERT = 'Insert'
    DELETE = 'Delete'


# Classes --------------------------------------------------------------------------------------------------------------
class Alignment:
    """
    Two gap-padded sequences plus the common sequence marking identical columns.

    Attributes:
        edit_distance (int): Number of edit operations realised by the alignment.
        aligned_a (str): The first sequence with gaps inserted.
        aligned_b (str): The second sequence with gaps inserted.
        common (str): The shared character on matching columns, the gap elsewhere.
        gap (str): The gap symbol.

    Examples:
        >>> aln = Alignment(2, 'TGC_A', 'T_CTA', 'T_C_A')
        >>> print(aln)
        TGC_A
        T_CTA
        T_C_A
    """
    __slots__ = ('edit_distance', 'aligned_a', 'aligned_b', 'common', 'gap')

    def __init__(self, edit_distance: int, aligned_a: str, aligned_b: str, common: str, gap: str = DEFAULT_GAP):
        if not len(aligned_a) == len(aligned_b) == len(common):
            raise ValueError('Aligned sequences and the common sequence must have the same length')
        object.__setattr__(self, 'edit_distance', edit_distance)
        object.__setattr__(self, 'aligned_a', aligned_a)
        object.__setattr__(self, 'aligned_b', aligned_b)
        object.__setattr__(self, 'common', common)
        object.__setattr__(self, 'gap', gap)

    def __setattr__(self, key, value): raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __repr__(self):
        return (f"Alignment(edit_distance={self.edit_distance}, aligned_a={self.aligned_a!r}, "
                f"aligned_b={self.aligned_b!r}, common={self.common!r})")

    def __str__(self): return f"{self.aligned_a}\n{self.aligned_b}\n{self.common}"

    def __len__(self): return len(self.aligned_a)

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return (self.edit_distance == other.edit_distance and
                    self.aligned_a == other.aligned_a and
                    self.aligned_b == other.aligned_b and
                    self.common == other.common and
                    self.gap == other.gap)
        return False

    def __hash__(self): return hash((self.edit_distance, self.aligned_a, self.aligned_b, self.common, self.gap))

    @property
    def a(self) -> str:
        """The first input sequence, recovered by removing gaps."""
        return self.aligned_a.replace(self.gap, '')

    @property
    def b(self) -> str:
        """The second input sequence, recovered by removing gaps."""
        return self.aligned_b.replace(self.gap, '')

    @property
    def n_matches(self) -> int: return len(self.common) - self.common.count(self.gap)

    def identity(self) -> float:
        return self.n_matches / len(self) if len(self) > 0 else 0.0

    def operations(self) -> Generator[tuple[EditOp, str, str], None, None]:
        """
        Yields the edit script turning the first sequence into the second.

        Each item is ``(op, a_char, b_char)``; the character on the gapped side of an
        insert or delete is the gap symbol.
        """
        gap = self.gap
        for x, y in zip(self.aligned_a, self.aligned_b):
            if x == gap: yield EditOp.INSERT, x, y
            elif y == gap: yield EditOp.DELETE, x, y
            elif x != y: yield EditOp.SUBSTITUTE, x, y
            else: yield EditOp.KEEP, x, y

    def recount(self) -> int:
        """Counts the edit operations implied by the columns."""
        return sum(op is not EditOp.KEEP for op, _, _ in self.operations())

    def flip(self) -> 'Alignment':
        """Swaps the roles of the two sequences."""
        return Alignment(self.edit_distance, self.aligned_b, self.aligned_a, self.common, self.gap)
