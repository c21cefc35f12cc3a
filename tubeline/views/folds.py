"""Pure fold steps shared by the composed views.

Each function turns joined rows into a scalar or a projection without
touching the store, so the same inputs always give the same outputs.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar
from uuid import UUID

from tubeline.db.models.user import User
from tubeline.views.schemas import OwnerProfile

K = TypeVar("K")
V = TypeVar("V")


@dataclass(frozen=True)
class RelationSummary:
    """Cardinality of an edge set and whether the viewer is one of its actors."""

    count: int
    viewer_has_relation: bool


def first_or_none(matches: Sequence[V]) -> V | None:
    """Collapse a 0-or-1 join result to an optional value."""
    return matches[0] if matches else None


def owner_profile(user: User | None) -> OwnerProfile | None:
    """Project a user down to the fields exposed next to their content."""
    if user is None:
        return None
    return OwnerProfile(id=user.id, full_name=user.full_name, username=user.username, avatar=user.avatar)


def fold_relation(actor_ids: Iterable[UUID], viewer_id: UUID | None) -> RelationSummary:
    actors = list(actor_ids)
    return RelationSummary(
        count=len(actors),
        viewer_has_relation=viewer_id is not None and viewer_id in actors,
    )


def group_edges(rows: Iterable[tuple[K, V]]) -> dict[K, list[V]]:
    """Group ``(target, actor)`` rows into ``{target: [actor, ...]}``."""
    grouped: dict[K, list[V]] = defaultdict(list)
    for target, actor in rows:
        grouped[target].append(actor)
    return dict(grouped)


def index_by_id(users: Iterable[User]) -> dict[UUID, list[User]]:
    """Join result keyed by user id; each value holds the 0 or 1 matches."""
    return group_edges((user.id, user) for user in users)
