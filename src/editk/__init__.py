"""
Top-K edit-distance alignments.

Computes the K alignments of two strings with the smallest Levenshtein distances,
each as a pair of gap-padded strings plus a common string marking matches.

Examples:
    >>> from editk import top_k_alignments
    >>> best = top_k_alignments('abcd', 'axyd', 5)
    >>> print(best[0].edit_distance, best[0].aligned_a, best[0].aligned_b, best[0].common)
    2 abcd axyd a__d
"""
from editk.align.alignment import Alignment, EditOp
from editk.align.distance import edit_distance
from editk.align.topk import AlignerConfig, InvalidArgumentError, TopKAligner, top_k_alignments
from editk.core.alphabet import DEFAULT_GAP, AlphabetError, GapCollisionError
from editk.core.select import Selection, Selector
from editk.core.table import CellEntry, Op, Table
from editk.utils.resources import RESOURCES, DependencyWarning, EditkWarning

__all__ = [
    'Alignment', 'EditOp', 'edit_distance', 'AlignerConfig', 'InvalidArgumentError', 'TopKAligner',
    'top_k_alignments', 'DEFAULT_GAP', 'AlphabetError', 'GapCollisionError', 'Selection', 'Selector',
    'CellEntry', 'Op', 'Table', 'RESOURCES', 'DependencyWarning', 'EditkWarning'
]
