#!/usr/bin/env python3
"""
Caller identity supplied by the authentication/session provider.

The engine never reads ambient session state; every operation that needs
authorization receives an Actor explicitly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from core.utils import to_uuid


class ActorRole(str, Enum):
    CANDIDATE = 'candidate'
    HIRING_ORG = 'hiring_org'
    SYSTEM = 'system'


@dataclass(frozen=True)
class Actor:
    """Who is calling: a candidate, an agent of a hiring organization, or the system."""
    user_id: Optional[str]
    role: ActorRole
    organization_id: Optional[str] = None

    @classmethod
    def candidate(cls, candidate_id: Any) -> "Actor":
        return cls(user_id=str(candidate_id), role=ActorRole.CANDIDATE)

    @classmethod
    def hiring_agent(cls, user_id: Any, organization_id: Any) -> "Actor":
        return cls(user_id=str(user_id), role=ActorRole.HIRING_ORG, organization_id=str(organization_id))

    @classmethod
    def system(cls) -> "Actor":
        return cls(user_id=None, role=ActorRole.SYSTEM)

    @property
    def is_candidate(self) -> bool:
        return self.role == ActorRole.CANDIDATE

    @property
    def is_hiring_org(self) -> bool:
        return self.role == ActorRole.HIRING_ORG

    def can_see_match(self, candidate_id: Any, organization_id: Any) -> bool:
        """The match's candidate, the hiring organization, or the system."""
        return (
            self.role == ActorRole.SYSTEM
            or self.owns_candidate(candidate_id)
            or self.acts_for_organization(organization_id)
        )

    def owns_candidate(self, candidate_id: Any) -> bool:
        return self.is_candidate and same_id(self.user_id, candidate_id)

    def acts_for_organization(self, organization_id: Any) -> bool:
        return (
            self.is_hiring_org
            and organization_id is not None
            and same_id(self.organization_id, organization_id)
        )


def same_id(left: Any, right: Any) -> bool:
    """Compare ids as UUIDs when both parse, so header casing does not matter."""
    if left is None or right is None:
        return False
    left_uuid, right_uuid = to_uuid(left), to_uuid(right)
    if left_uuid is not None and right_uuid is not None:
        return left_uuid == right_uuid
    return str(left) == str(right)
