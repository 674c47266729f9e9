"""Общие fixtures для тестов ledger."""

import pytest

from betting_ledger import BettingProtocol, InMemoryToken, LedgerConfig, PayoutMode

OWNER = "0xowner"
BETTORS = ["0xbettor1", "0xbettor2", "0xbettor3", "0xbettor4"]
INITIAL_BALANCE = 1_000
CUSTODY = LedgerConfig().custody_identity


def fund(token: InMemoryToken, bettor: str, amount: int = INITIAL_BALANCE) -> None:
    """Mint + approve custody на amount."""
    token.mint(bettor, amount)
    token.approve(bettor, CUSTODY, amount)


@pytest.fixture
def token():
    return InMemoryToken()


@pytest.fixture
def protocol(token):
    """Ledger в PUSH режиме, bettors профинансированы."""
    protocol = BettingProtocol(token.account(CUSTODY), OWNER)
    for bettor in BETTORS:
        fund(token, bettor)
    return protocol


@pytest.fixture
def pull_protocol(token):
    """Ledger в PULL режиме, bettors профинансированы."""
    protocol = BettingProtocol(
        token.account(CUSTODY), OWNER, LedgerConfig(payout_mode=PayoutMode.PULL)
    )
    for bettor in BETTORS:
        fund(token, bettor)
    return protocol


@pytest.fixture
def active_bet(protocol):
    """Команды 1, 2 и активная ставка 0 с min_stake 10."""
    protocol.add_team(OWNER, "Team 1")
    protocol.add_team(OWNER, "Team 2")
    bet_id = protocol.create_bet(OWNER, 1, 2, 10)
    protocol.set_bet_active(OWNER, bet_id)
    return bet_id


@pytest.fixture
def pull_active_bet(pull_protocol):
    pull_protocol.add_team(OWNER, "Team 1")
    pull_protocol.add_team(OWNER, "Team 2")
    bet_id = pull_protocol.create_bet(OWNER, 1, 2, 10)
    pull_protocol.set_bet_active(OWNER, bet_id)
    return bet_id
