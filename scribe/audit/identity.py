"""Resolution of the acting principal recorded on audit records."""

from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

from scribe.audit.models import UNKNOWN_ACTOR


class Actor(BaseModel):
    """The principal performing a mutation. ``id`` may be absent."""

    model_config = ConfigDict(frozen=True)

    id: Any = None


ActorResolver = Callable[[], Awaitable[Actor | None]]


def actor_id_of(actor: Actor | None) -> str:
    """Return the actor id as a string, or UNKNOWN_ACTOR when absent."""
    if actor is None or actor.id is None:
        return UNKNOWN_ACTOR
    return str(actor.id)


def static_actor(actor_id: Any) -> ActorResolver:
    """Build a resolver that always returns the same actor.

    Useful for scripts and background jobs that act as a fixed principal.
    """
    actor = Actor(id=actor_id)

    async def resolve() -> Actor:
        return actor

    return resolve
