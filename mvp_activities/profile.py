"""Parsing of the user profile returned by the UserStatus endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class UserProfile:
    """In-memory representation of the signed-in MVP profile."""

    id: int
    user_profile_identifier: Optional[str] = None
    raw: Dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "UserProfile":
        """Create a UserProfile from the decoded UserStatus response.

        Raises KeyError when the response has no ``userStatusModel.id``.
        """
        if not isinstance(payload, Mapping):
            raise KeyError("userStatusModel.id")

        status = payload.get("userStatusModel")
        if not isinstance(status, Mapping) or status.get("id") is None:
            raise KeyError("userStatusModel.id")

        identifier = status.get("userProfileIdentifier")
        return cls(
            id=status["id"],
            user_profile_identifier=str(identifier) if identifier else None,
            raw=dict(payload),
        )
