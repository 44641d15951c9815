"""Import table: resolves package aliases to full import paths."""

from __future__ import annotations

from typing import Iterable

from partial_types.errors import UnresolvedImport
from partial_types.model import ImportSpec

# Aliases that bring a package in without a usable qualifier
UNQUALIFIED_ALIASES = frozenset({"_", "."})


class ImportTable:
    """Mapping from package alias to import path for one source unit."""

    def __init__(self) -> None:
        self._paths: dict[str, str] = {}

    @classmethod
    def from_specs(cls, specs: Iterable[ImportSpec]) -> ImportTable:
        """Build a table from a unit's import specs.

        The alias of a spec is its explicit name, or the last segment of its
        path when it has none. When two specs claim the same alias the first
        one wins.
        """
        table = cls()
        for spec in specs:
            alias = spec.effective_alias
            if alias in UNQUALIFIED_ALIASES:
                continue
            table._paths.setdefault(alias, spec.path)
        return table

    def lookup(self, alias: str) -> str:
        """Return the import path for *alias*.

        Raises:
            UnresolvedImport: If no import uses the alias.
        """
        try:
            return self._paths[alias]
        except KeyError:
            raise UnresolvedImport(alias) from None

    def __contains__(self, alias: object) -> bool:
        return alias in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def aliases(self) -> list[str]:
        """List the resolvable aliases in insertion order."""
        return list(self._paths)
