"""Request context for ownership enforcement."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Identity of the acting user.

    Supplied by the identity collaborator and passed explicitly to every
    repository call; there is no ambient "current user".
    """

    user_id: UUID
