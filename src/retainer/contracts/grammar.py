"""NameGrammar protocol: the pluggable filename-to-record mapping.

Implemented by:
- core/naming/dashed.py (DashedNameGrammar)
- core/naming/duplicity.py (DuplicityNameGrammar)

Consumed by core/expiry/filter.py. Chain building and expiration only ever
see BackupRecord values, so a grammar can be swapped without touching them.
"""

from typing import Protocol, runtime_checkable

from retainer.contracts.records import ParseResult


@runtime_checkable
class NameGrammar(Protocol):
    """Maps a raw filename to a BackupRecord or an Unrecognized result.

    Implementations must be total and pure: every input yields exactly one
    of the two results and malformed input never raises.
    """

    name: str

    def parse(self, raw_name: str) -> ParseResult:
        """Parse one filename (no path components)."""
        ...
