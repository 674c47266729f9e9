"""
Domain models and value objects.

Contains fundamental ledger entities like Team, Bet, Stake, LedgerEvent.
"""

from betting_ledger.core.domain.bet import Bet, BetStatus
from betting_ledger.core.domain.events import EventType, LedgerEvent
from betting_ledger.core.domain.ledger_snapshot import LedgerSnapshot, PayoutMode
from betting_ledger.core.domain.stake import SideMembership, Stake
from betting_ledger.core.domain.team import Team
from betting_ledger.core.domain.units import (
    FIRST_BET_ID,
    FIRST_TEAM_ID,
    NO_TEAM_ID,
    is_amount,
    is_positive_amount,
    is_valid_bet_id,
    is_valid_team_id,
)

__all__ = [
    # Units module
    "NO_TEAM_ID",
    "FIRST_TEAM_ID",
    "FIRST_BET_ID",
    "is_amount",
    "is_positive_amount",
    "is_valid_team_id",
    "is_valid_bet_id",
    # Team model
    "Team",
    # Bet model
    "Bet",
    "BetStatus",
    # Stake model
    "Stake",
    "SideMembership",
    # Events
    "LedgerEvent",
    "EventType",
    # Snapshot
    "LedgerSnapshot",
    "PayoutMode",
]
