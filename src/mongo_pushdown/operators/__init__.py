"""MongoDB operator compilers for filter leaves."""

from __future__ import annotations

from .null import compile_null
from .set import compile_set
from .standard import compile_standard
from .string import compile_string

__all__ = [
    "compile_standard",
    "compile_string",
    "compile_null",
    "compile_set",
]
