"""
Optional dependency management and the conditional JIT decorator.
"""
from functools import lru_cache
from importlib import import_module
from pathlib import Path
from typing import Callable, Union
from warnings import warn

import numpy as np
from numpy.random import default_rng, Generator


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class EditkWarning(Warning): pass
class DependencyWarning(EditkWarning): pass


# Classes --------------------------------------------------------------------------------------------------------------
class Resources:
    """
    Reports optional dependencies and hands out random number generators.

    No generator is shared between callers: ``rng`` builds a new one on each call so
    that seeding one aligner never perturbs another.

    Attributes:
        package (str): The package name.
    """
    def __init__(self) -> None:
        self.package = Path(__file__).parent.parent.name

    @staticmethod
    @lru_cache(maxsize=None)
    def has_module(module_name: str) -> bool:
        """Checks if a python package is installed."""
        try:
            import_module(module_name)
            return True
        except ImportError: return False

    def require(self, *packages: str) -> bool:
        """
        Checks that optional packages are importable, warning about each missing one.

        Examples:
            >>> if not RESOURCES.require('numba'): ...
        """
        if missing := [p for p in packages if not self.has_module(p)]:
            warn(f"{self.package} is missing optional dependencies: {', '.join(missing)}. "
                 f"Falling back to pure Python kernels.", DependencyWarning, stacklevel=2)
            return False
        return True

    @staticmethod
    def rng(seed: Union[int, Generator, None] = None) -> Generator:
        """Returns a fresh numpy generator, or ``seed`` itself if it already is one."""
        if isinstance(seed, Generator): return seed
        return default_rng(seed)


# Decorators -----------------------------------------------------------------------------------------------------------
def jit(signature_or_function=None, **options) -> Callable:
    """
    Conditional Numba JIT decorator.

    If 'numba' is installed (checked via RESOURCES), this applies `numba.jit`
    with the provided arguments. Otherwise, it returns the original function unmodified,
    ignoring any compilation options.

    Examples:
        >>> @jit  # Bare usage
        ... def func(): ...

        >>> @jit(nopython=True, cache=True)  # Configured usage
        ... def func(): ...
    """
    # 1. Fallback: Numba not installed
    if not RESOURCES.has_module('numba'):
        if callable(signature_or_function): return signature_or_function  # Handle bare @jit
        def passthrough(func: Callable) -> Callable: return func  # Handle @jit(...)
        return passthrough
    # 2. Apply Numba
    from numba import jit as real_jit
    if callable(signature_or_function): return real_jit(signature_or_function)  # Handle bare @jit
    return real_jit(signature_or_function, **options)  # Handle @jit(...)


# Constants ------------------------------------------------------------------------------------------------------------
RESOURCES = Resources()
INDEX_DTYPE = np.int64
