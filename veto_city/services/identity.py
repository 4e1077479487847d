from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from ..models.payloads import OwnerRef, TeamRef
from ..models.sleeper import Roster, User

AVATAR_THUMB_URL = "https://sleepercdn.com/avatars/thumbs"


def avatar_url(avatar: Optional[str]) -> Optional[str]:
    if not avatar:
        return None
    return f"{AVATAR_THUMB_URL}/{avatar}"


def placeholder_name(roster_id: Optional[int]) -> str:
    return f"Team {roster_id}" if roster_id is not None else "-"


def resolve_team_name(user: Optional[User], roster_id: Optional[int]) -> str:
    """
    Display name for a roster: team nickname, then display name, then login
    name, then a ``Team {roster_id}`` placeholder.
    """
    if user is not None:
        for candidate in (user.metadata.team_name, user.display_name, user.username):
            if candidate.strip():
                return candidate.strip()
    return placeholder_name(roster_id)


@dataclass
class SeasonIdentity:
    """Who controls which roster in one season, and what to call them."""

    owner_by_roster: Dict[int, str] = field(default_factory=dict)
    roster_by_owner: Dict[str, int] = field(default_factory=dict)
    teams: Dict[int, TeamRef] = field(default_factory=dict)

    @classmethod
    def build(cls, users: Iterable[User], rosters: Iterable[Roster]) -> "SeasonIdentity":
        user_by_id = {u.user_id: u for u in users if u.user_id}
        identity = cls()

        for roster in rosters:
            if roster.roster_id is None:
                continue
            owner_id = roster.owner_id
            user = user_by_id.get(owner_id) if owner_id else None

            identity.teams[roster.roster_id] = TeamRef(
                roster_id=roster.roster_id,
                owner_id=owner_id,
                name=resolve_team_name(user, roster.roster_id),
                avatar=avatar_url(user.avatar) if user else None,
            )
            if owner_id:
                identity.owner_by_roster[roster.roster_id] = owner_id
                identity.roster_by_owner.setdefault(owner_id, roster.roster_id)

        return identity

    def owner_of(self, roster_id: Optional[int]) -> Optional[str]:
        if roster_id is None:
            return None
        return self.owner_by_roster.get(roster_id)

    def team(self, roster_id: Optional[int]) -> TeamRef:
        """The roster's display record; unknown rosters get a placeholder."""
        if roster_id is not None and roster_id in self.teams:
            return self.teams[roster_id]
        return TeamRef(roster_id=roster_id, name=placeholder_name(roster_id))

    def owner(self, owner_id: str) -> Optional[OwnerRef]:
        roster_id = self.roster_by_owner.get(owner_id)
        if roster_id is None:
            return None
        team = self.teams[roster_id]
        return OwnerRef(owner_id=owner_id, name=team.name, avatar=team.avatar)

    def has_owner(self, owner_id: str) -> bool:
        return owner_id in self.roster_by_owner
