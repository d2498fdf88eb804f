"""
Identifier case folding and system namespace filtering.
"""

from typing import FrozenSet, Iterable


class IdentifierPolicy:
    """
    Case-folding rules and the deny-list of non-user-data namespaces.

    The deny-list is compared case-insensitively; it is data supplied by the
    dialect adapter and configuration, not a fixed constant.
    """

    def __init__(self, system_namespaces: Iterable[str] = ()):
        self.system_namespaces: FrozenSet[str] = frozenset(
            name.upper() for name in system_namespaces
        )

    def with_extra_namespaces(self, names: Iterable[str]) -> "IdentifierPolicy":
        """Return a policy whose deny-list also contains names."""
        return IdentifierPolicy(self.system_namespaces | {n.upper() for n in names})

    def is_system_namespace(self, name: str) -> bool:
        return name.upper() in self.system_namespaces

    def normalize_for_lookup(self, name: str, stores_upper_case: bool) -> str:
        """Fold a logical name to the physical case used by the database."""
        if stores_upper_case and not self.is_system_namespace(name):
            return name.upper()
        return name

    def normalize_for_display(self, name: str) -> str:
        return name.lower()
