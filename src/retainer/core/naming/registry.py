"""Lookup of filename grammars by configured name."""

from __future__ import annotations

from collections.abc import Callable

from retainer.contracts.errors import ConfigurationError
from retainer.contracts.grammar import NameGrammar
from retainer.core.naming.dashed import DashedNameGrammar
from retainer.core.naming.duplicity import DuplicityNameGrammar

DEFAULT_GRAMMAR = "dashed"

_GRAMMAR_FACTORIES: dict[str, Callable[[], NameGrammar]] = {
    DashedNameGrammar.name: DashedNameGrammar,
    DuplicityNameGrammar.name: DuplicityNameGrammar,
}


def available_grammars() -> list[str]:
    return sorted(_GRAMMAR_FACTORIES)


def get_grammar(name: str = DEFAULT_GRAMMAR) -> NameGrammar:
    """Instantiate the grammar registered under ``name``.

    Raises:
        ConfigurationError: If no grammar has that name.
    """
    try:
        factory = _GRAMMAR_FACTORIES[name]
    except KeyError:
        raise ConfigurationError(f"Unknown filename grammar {name!r}. Available: {', '.join(available_grammars())}") from None
    return factory()
