"""
Module for converting text to integer code arrays and back.

Sequences are handled as arrays of Unicode code points so that the kernels can
compare characters as plain integers, whatever script the input is written in.
"""
from typing import Final

import numpy as np


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class AlphabetError(Exception):
    """Raised when text cannot be encoded or a symbol is incompatible with the alphabet."""


class GapCollisionError(AlphabetError):
    """Raised when the gap symbol occurs in one of the sequences being aligned."""


# Constants ------------------------------------------------------------------------------------------------------------
CODE_DTYPE: Final = np.int32
DEFAULT_GAP: Final = '_'
_WIRE_DTYPE: Final = np.dtype('<u4')
_ENCODING: Final = 'utf-32-le'


# Functions ------------------------------------------------------------------------------------------------------------
def encode(text: str) -> np.ndarray:
    """
    Encodes a string as an array of code points.

    Examples:
        >>> encode('TGCA')
        array([84, 71, 67, 65], dtype=int32)
    """
    if not isinstance(text, str): raise AlphabetError(f'Expected str, got {type(text).__name__}')
    if not text: return np.empty(0, dtype=CODE_DTYPE)
    raw = text.encode(_ENCODING, 'surrogatepass')
    return np.frombuffer(raw, dtype=_WIRE_DTYPE).astype(CODE_DTYPE)


def decode(codes: np.ndarray) -> str:
    """Decodes an array of code points back into a string."""
    if len(codes) == 0: return ''
    return np.asarray(codes).astype(_WIRE_DTYPE).tobytes().decode(_ENCODING, 'surrogatepass')


def gap_code(gap: str) -> int:
    """Returns the code point of a single-character gap symbol."""
    if not isinstance(gap, str) or len(gap) != 1:
        raise AlphabetError(f'Gap symbol must be a single character, got {gap!r}')
    return ord(gap)


def check_gap(gap: str, *texts: str):
    """
    Raises GapCollisionError if ``gap`` occurs in any of ``texts``.

    A gap that also appears in the input makes the aligned strings ambiguous:
    stripping the gap would no longer recover the original sequences.
    """
    for i, text in enumerate(texts):
        if gap in text:
            raise GapCollisionError(f'Gap symbol {gap!r} occurs in sequence {i} at position {text.index(gap)}')
