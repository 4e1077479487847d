from typing import Dict, List, Optional, Tuple

from ..models.payloads import TeamRef, TransactionAsset, TransactionItem
from ..models.sleeper import DraftPickMovement, Player, Transaction
from .identity import SeasonIdentity
from .season_data import SeasonBundle
from .stats import TRADE, WAIVER_TYPES, transaction_participants

# Lost waiver claims; career totals still count them
SKIPPED_STATUSES = ("failed",)


def player_label(players: Dict[str, Player], player_id: str) -> str:
    player = players.get(player_id)
    if player is None:
        return player_id
    return player.label or player_id


def pick_label(identity: SeasonIdentity, pick: DraftPickMovement) -> str:
    original = identity.team(pick.roster_id).name
    return f"{pick.season} Round {pick.round} ({original})"


def _team_or_none(identity: SeasonIdentity, roster_id: Optional[int]) -> Optional[TeamRef]:
    return identity.team(roster_id) if roster_id is not None else None


def transaction_item(tx: Transaction, identity: SeasonIdentity, players: Dict[str, Player]) -> TransactionItem:
    adds = [
        TransactionAsset(
            kind="player",
            label=player_label(players, player_id),
            from_team=_team_or_none(identity, tx.drops.get(player_id)),
            to_team=identity.team(roster_id),
        )
        for player_id, roster_id in tx.adds.items()
    ]
    # Players that changed hands already appear under adds
    drops = [
        TransactionAsset(kind="player", label=player_label(players, player_id), from_team=identity.team(roster_id))
        for player_id, roster_id in tx.drops.items()
        if player_id not in tx.adds
    ]
    picks = [
        TransactionAsset(
            kind="pick",
            label=pick_label(identity, pick),
            from_team=_team_or_none(identity, pick.previous_owner_id),
            to_team=_team_or_none(identity, pick.owner_id),
        )
        for pick in tx.draft_picks
    ]
    return TransactionItem(
        transaction_id=tx.transaction_id,
        type=tx.type,
        week=tx.week,
        status_updated=tx.status_updated,
        teams=[identity.team(roster_id) for roster_id in transaction_participants(tx)],
        adds=adds,
        drops=drops,
        picks=picks,
    )


def build_transaction_feed(
    bundle: SeasonBundle, players: Dict[str, Player]
) -> Tuple[List[TransactionItem], int, int]:
    """Every settled move of the season, newest first, with trade and waiver counts."""
    identity = bundle.identity
    settled = [tx for tx in bundle.transactions if tx.status not in SKIPPED_STATUSES]
    settled.sort(key=lambda tx: (tx.status_updated, tx.week), reverse=True)

    items = [transaction_item(tx, identity, players) for tx in settled]
    trades = sum(1 for tx in settled if tx.type == TRADE)
    waivers = sum(1 for tx in settled if tx.type in WAIVER_TYPES)
    return items, trades, waivers
