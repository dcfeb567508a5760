"""
Classical Wagner-Fischer edit distance, used as the reference for the top-K aligner.
"""
import numpy as np

from editk.core.alphabet import encode
from editk.core.table import INSERTION_COST, DELETION_COST, SUBSTITUTION_COST
from editk.utils.resources import jit


# Functions ------------------------------------------------------------------------------------------------------------
def edit_distance(a: str, b: str) -> int:
    """
    Returns the Levenshtein distance between two strings.

    Examples:
        >>> edit_distance('kitten', 'sitting')
        3
    """
    return int(_wagner_fischer_kernel(encode(a), encode(b), INSERTION_COST, DELETION_COST, SUBSTITUTION_COST))


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True)
def _wagner_fischer_kernel(a, b, ins_cost, del_cost, sub_cost):
    n = len(b)
    prev = np.empty(n + 1, dtype=np.int64)
    curr = np.empty(n + 1, dtype=np.int64)
    for col in range(n + 1): prev[col] = col * del_cost
    for row in range(1, len(a) + 1):
        curr[0] = row * ins_cost
        for col in range(1, n + 1):
            best = prev[col - 1] + (0 if a[row - 1] == b[col - 1] else sub_cost)
            if prev[col] + ins_cost < best: best = prev[col] + ins_cost
            if curr[col - 1] + del_cost < best: best = curr[col - 1] + del_cost
            curr[col] = best
        prev, curr = curr, prev
    return prev[n]
