"""Precedence rules between configuration scopes.

Which scope wins, and how each settings field combines across scopes, is
declared here once and consumed by the merge engine and the import resolver.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypeVar

from claude_config_kit.models.enums import FieldPolicy, Scope

T = TypeVar("T")

# Settings field (on-disk name) -> how it combines across scopes
FIELD_POLICIES: dict[str, FieldPolicy] = {
    "permissions.allow": FieldPolicy.UNION,
    "permissions.deny": FieldPolicy.UNION,
    "disallowedTools": FieldPolicy.UNION,
    "env": FieldPolicy.OVERRIDE,
    "attribution": FieldPolicy.OVERRIDE,
    "hooks": FieldPolicy.CONCATENATE,
}


@dataclass(frozen=True)
class PrecedenceRule:
    """Scope ordering used by every resolution.

    ``order`` runs from least to most specific; for override fields the last
    scope defining a value wins.
    """

    order: tuple[Scope, ...] = (Scope.GLOBAL, Scope.PROJECT_SHARED, Scope.PROJECT_LOCAL)

    def ordered(self, documents: Mapping[Scope, T | None]) -> list[tuple[Scope, T]]:
        """Return present documents in precedence order.

        The result depends only on ``order``, never on the mapping's
        insertion order.
        """
        result: list[tuple[Scope, T]] = []
        for scope in self.order:
            document = documents.get(scope)
            if document is not None:
                result.append((scope, document))
        return result

    def winner(self, scopes: list[Scope]) -> Scope | None:
        """Return the most specific of ``scopes``."""
        ranked = [scope for scope in self.order if scope in scopes]
        return ranked[-1] if ranked else None

    @staticmethod
    def policy(field_name: str) -> FieldPolicy:
        """Return the combination policy of a settings field.

        Raises:
            KeyError: If the field has no declared policy.
        """
        return FIELD_POLICIES[field_name]


DEFAULT_PRECEDENCE = PrecedenceRule()
