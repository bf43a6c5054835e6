"""Filename grammars mapping raw archive names to BackupRecord values."""

from retainer.core.naming.dashed import DashedNameGrammar
from retainer.core.naming.duplicity import DuplicityNameGrammar
from retainer.core.naming.registry import DEFAULT_GRAMMAR, available_grammars, get_grammar

__all__ = [
    "DEFAULT_GRAMMAR",
    "DashedNameGrammar",
    "DuplicityNameGrammar",
    "available_grammars",
    "get_grammar",
]
