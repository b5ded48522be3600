"""
pylox Runtime Package

Runtime collaborators shared with an evaluator: the variable store and
its error type.
"""

from .environment import Environment
from .errors import LoxRuntimeError

__all__ = [
    "Environment",
    "LoxRuntimeError",
]
