"""
ScopeFilter -- the tenant/garage restriction applied to every report query.

Responsibility:
    Carries the *output* of scope resolution (which tenant, which garages,
    and whether the caller may export data) into the read path.  Resolving
    a session to a scope is the host application's job; the kernel only
    consumes the result.

Architecture position:
    Kernel > Domain -- pure value object, zero I/O.

Invariants:
    - Immutable for the lifetime of one request.
    - A selected garage narrows the scope to exactly that garage.
    - An empty garage set with no selection matches nothing, never
      "everything".
"""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class ScopeFilter:
    """Tenant plus garage restriction for one report request."""

    tenant_id: UUID
    garage_ids: frozenset[UUID] = field(default_factory=frozenset)
    selected_garage_id: UUID | None = None
    can_export_data: bool = False
    actor_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.garage_ids, frozenset):
            object.__setattr__(self, "garage_ids", frozenset(self.garage_ids))

    @classmethod
    def for_garage(
        cls,
        tenant_id: UUID,
        garage_id: UUID,
        *,
        can_export_data: bool = False,
        actor_id: str | None = None,
    ) -> "ScopeFilter":
        """Scope narrowed to a single selected garage."""
        return cls(
            tenant_id=tenant_id,
            garage_ids=frozenset({garage_id}),
            selected_garage_id=garage_id,
            can_export_data=can_export_data,
            actor_id=actor_id,
        )

    @property
    def effective_garage_ids(self) -> frozenset[UUID]:
        """Garages that queries must be restricted to."""
        if self.selected_garage_id is not None:
            return frozenset({self.selected_garage_id})
        return self.garage_ids

    @property
    def is_empty(self) -> bool:
        """True when the scope admits no garage at all."""
        return not self.effective_garage_ids

    def describe(self) -> str:
        """Compact label for log context."""
        if self.selected_garage_id is not None:
            return f"garage:{self.selected_garage_id}"
        return f"garages:{len(self.garage_ids)}"
