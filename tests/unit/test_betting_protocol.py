"""
Тесты BettingProtocol — сценарии полного цикла

Coverage:
- Команды: регистрация, деактивация, повторная активация
- Ставки: создание, активация, деактивация
- Pledge: валидация, накопление, фиксация стороны
- Settle: выплаты победителям, replay guard, пустая сторона
- Read-поверхность и снапшоты
"""

import pytest

from betting_ledger import (
    AuthorizationError,
    BetStatus,
    BettingProtocol,
    EventType,
    InMemoryToken,
    LedgerConfig,
    LedgerValidationError,
    RejectReason,
    StateConflictError,
)
from tests.conftest import BETTORS, CUSTODY, INITIAL_BALANCE, OWNER


def custody_balance(protocol: BettingProtocol) -> int:
    return protocol.token.balance_of(protocol.config.custody_identity)


# =============================================================================
# TEAMS
# =============================================================================


class TestTeams:
    def test_owner_is_deployer(self, protocol):
        assert protocol.owner == OWNER

    def test_team_ids_start_at_one(self, protocol):
        assert protocol.add_team(OWNER, "Team 1") == 1
        assert protocol.add_team(OWNER, "Team 2") == 2
        assert protocol.team_count == 2

        team = protocol.get_team(1)
        assert team.name == "Team 1"
        assert team.is_active

    def test_duplicate_names_allowed(self, protocol):
        protocol.add_team(OWNER, "Same")
        protocol.add_team(OWNER, "Same")

        assert [t.name for t in protocol.get_all_teams()] == ["Same", "Same"]

    def test_non_owner_cannot_add_team(self, protocol):
        with pytest.raises(AuthorizationError, match="Not owner"):
            protocol.add_team(BETTORS[0], "Team 1")

        assert protocol.team_count == 0

    @pytest.mark.parametrize("name", [42, None, b"Team 1"])
    def test_non_string_name_rejected(self, protocol, name):
        with pytest.raises(LedgerValidationError, match="Invalid team name") as exc_info:
            protocol.add_team(OWNER, name)

        assert exc_info.value.reason == RejectReason.INVALID_TEAM_NAME
        assert protocol.team_count == 0
        assert protocol.events == []

    def test_empty_name_allowed(self, protocol):
        assert protocol.add_team(OWNER, "") == 1

    def test_toggle_team(self, protocol):
        protocol.add_team(OWNER, "Team 1")

        protocol.set_team_inactive(OWNER, 1)
        assert not protocol.get_team(1).is_active

        protocol.set_team_active(OWNER, 1)
        assert protocol.get_team(1).is_active

    @pytest.mark.parametrize("team_id", [0, 2, -1])
    def test_toggle_invalid_team(self, protocol, team_id):
        protocol.add_team(OWNER, "Team 1")

        with pytest.raises(LedgerValidationError, match="Invalid team-id"):
            protocol.set_team_inactive(OWNER, team_id)

    def test_toggle_already_in_state(self, protocol):
        protocol.add_team(OWNER, "Team 1")

        with pytest.raises(StateConflictError, match="already active"):
            protocol.set_team_active(OWNER, 1)

        protocol.set_team_inactive(OWNER, 1)
        with pytest.raises(StateConflictError, match="already inactive"):
            protocol.set_team_inactive(OWNER, 1)

    def test_non_owner_cannot_toggle_team(self, protocol):
        protocol.add_team(OWNER, "Team 1")

        with pytest.raises(AuthorizationError):
            protocol.set_team_inactive(BETTORS[0], 1)

        assert protocol.get_team(1).is_active

    def test_get_team_invalid_id(self, protocol):
        with pytest.raises(LedgerValidationError, match="Invalid team-id"):
            protocol.get_team(0)


# =============================================================================
# BET CREATION AND LIFECYCLE
# =============================================================================


class TestBetLifecycle:
    @pytest.fixture(autouse=True)
    def teams(self, protocol):
        for name in ("Team 1", "Team 2", "Team 3"):
            protocol.add_team(OWNER, name)
        protocol.set_team_inactive(OWNER, 3)

    def test_create_bet(self, protocol):
        assert protocol.create_bet(OWNER, 1, 2, 10) == 0
        assert protocol.create_bet(OWNER, 2, 1, 5) == 1

        bet = protocol.get_bet(0)
        assert bet.status == BetStatus.INACTIVE
        assert (bet.team_a_id, bet.team_b_id, bet.min_stake) == (1, 2, 10)
        assert protocol.get_total_amount_on_bet(0) == 0

    @pytest.mark.parametrize(
        "team_a_id, team_b_id, min_stake, message",
        [
            (1, 1, 10, "same teams"),
            (0, 2, 10, "Invalid teamAId"),
            (1, 9, 10, "Invalid teamBId"),
            (3, 1, 10, "team's inactive"),
            (1, 2, 0, "Invalid amount"),
        ],
    )
    def test_create_bet_rejected(self, protocol, team_a_id, team_b_id, min_stake, message):
        with pytest.raises(Exception, match=message):
            protocol.create_bet(OWNER, team_a_id, team_b_id, min_stake)

        assert protocol.bet_count == 0

    def test_rejected_creation_does_not_consume_id(self, protocol):
        with pytest.raises(LedgerValidationError):
            protocol.create_bet(OWNER, 1, 1, 10)

        assert protocol.create_bet(OWNER, 1, 2, 10) == 0

    def test_non_owner_cannot_create_bet(self, protocol):
        with pytest.raises(AuthorizationError):
            protocol.create_bet(BETTORS[0], 1, 2, 10)

    def test_team_deactivation_keeps_existing_bets(self, protocol):
        bet_id = protocol.create_bet(OWNER, 1, 2, 10)
        protocol.set_bet_active(OWNER, bet_id)
        protocol.set_team_inactive(OWNER, 1)

        protocol.pledge(BETTORS[0], 10, bet_id, 1)

        assert protocol.get_total_amount_on_bet(bet_id) == 10

    def test_activate_and_deactivate(self, protocol):
        bet_id = protocol.create_bet(OWNER, 1, 2, 10)

        protocol.set_bet_active(OWNER, bet_id)
        assert protocol.get_bet(bet_id).status == BetStatus.ACTIVE

        protocol.set_bet_inactive(OWNER, bet_id)
        assert protocol.get_bet(bet_id).status == BetStatus.INACTIVE

    def test_lifecycle_errors(self, protocol):
        bet_id = protocol.create_bet(OWNER, 1, 2, 10)

        with pytest.raises(LedgerValidationError, match="invalid bet id"):
            protocol.set_bet_active(OWNER, 5)
        with pytest.raises(StateConflictError, match="bet already inactive"):
            protocol.set_bet_inactive(OWNER, bet_id)

        protocol.set_bet_active(OWNER, bet_id)
        with pytest.raises(StateConflictError, match="already active"):
            protocol.set_bet_active(OWNER, bet_id)

    def test_cannot_deactivate_after_pledge(self, protocol):
        bet_id = protocol.create_bet(OWNER, 1, 2, 10)
        protocol.set_bet_active(OWNER, bet_id)
        protocol.pledge(BETTORS[0], 10, bet_id, 2)

        with pytest.raises(StateConflictError, match="bettors already betted"):
            protocol.set_bet_inactive(OWNER, bet_id)

        assert protocol.get_bet(bet_id).status == BetStatus.ACTIVE

    def test_completed_is_terminal(self, protocol):
        bet_id = protocol.create_bet(OWNER, 1, 2, 10)
        protocol.set_bet_active(OWNER, bet_id)
        protocol.settle(OWNER, bet_id, 1)

        with pytest.raises(StateConflictError, match="bet already completed"):
            protocol.set_bet_active(OWNER, bet_id)
        with pytest.raises(StateConflictError, match="bet already inactive"):
            protocol.set_bet_inactive(OWNER, bet_id)

    def test_non_owner_cannot_activate(self, protocol):
        bet_id = protocol.create_bet(OWNER, 1, 2, 10)

        with pytest.raises(AuthorizationError):
            protocol.set_bet_active(BETTORS[0], bet_id)


# =============================================================================
# PLEDGES
# =============================================================================


class TestPledges:
    def test_pledge_moves_funds_into_custody(self, protocol, active_bet):
        stake = protocol.pledge(BETTORS[0], 10, active_bet, 1)

        assert (stake.team_id, stake.amount) == (1, 10)
        assert protocol.get_bettor_bet_details(active_bet, BETTORS[0]) == (1, 10)
        assert protocol.get_bettors_on_team(active_bet, 1) == [BETTORS[0]]
        assert protocol.get_bet(active_bet).total_a == 10
        assert custody_balance(protocol) == 10
        assert protocol.token.balance_of(BETTORS[0]) == INITIAL_BALANCE - 10

    def test_pledges_accumulate(self, protocol, active_bet):
        protocol.pledge(BETTORS[0], 10, active_bet, 2)
        protocol.pledge(BETTORS[0], 15, active_bet, 2)

        assert protocol.get_bettor_bet_details(active_bet, BETTORS[0]) == (2, 25)
        assert protocol.get_bettors_on_team(active_bet, 2) == [BETTORS[0]]
        assert protocol.get_all_bets_by_bettor(BETTORS[0]) == [active_bet]
        assert protocol.get_bet(active_bet).total_b == 25

    def test_side_fixed_by_first_pledge(self, protocol, active_bet):
        protocol.pledge(BETTORS[0], 10, active_bet, 1)

        with pytest.raises(StateConflictError, match="side already selected"):
            protocol.pledge(BETTORS[0], 10, active_bet, 2)

        assert protocol.get_bettors_on_team(active_bet, 2) == []
        assert custody_balance(protocol) == 10

    def test_undersized_pledge_rejected(self, protocol, active_bet):
        with pytest.raises(LedgerValidationError, match="invalid bet amount"):
            protocol.pledge(BETTORS[0], 5, active_bet, 1)

        assert protocol.get_total_amount_on_bet(active_bet) == 0
        assert protocol.token.balance_of(BETTORS[0]) == INITIAL_BALANCE

    @pytest.mark.parametrize("team_id", [0, 3])
    def test_pledge_invalid_side(self, protocol, active_bet, team_id):
        protocol.add_team(OWNER, "Team 3")

        with pytest.raises(LedgerValidationError, match="invalid team-id"):
            protocol.pledge(BETTORS[0], 10, active_bet, team_id)

    def test_pledge_invalid_bet(self, protocol, active_bet):
        with pytest.raises(LedgerValidationError, match="invalid bet id"):
            protocol.pledge(BETTORS[0], 10, 7, 1)

    def test_pledge_inactive_bet(self, protocol, active_bet):
        pending = protocol.create_bet(OWNER, 1, 2, 10)

        with pytest.raises(StateConflictError, match="bet inactive"):
            protocol.pledge(BETTORS[0], 10, pending, 1)

    def test_pledge_without_allowance(self, protocol, token, active_bet):
        token.mint("0xunfunded", 100)

        with pytest.raises(Exception, match="token transfer failed"):
            protocol.pledge("0xunfunded", 10, active_bet, 1)

        assert protocol.get_bettor_bet_details(active_bet, "0xunfunded") == (0, 0)
        assert protocol.get_all_bets_by_bettor("0xunfunded") == []

    def test_side_members_in_first_pledge_order(self, protocol, active_bet):
        for bettor in (BETTORS[2], BETTORS[0], BETTORS[1]):
            protocol.pledge(bettor, 10, active_bet, 1)
        protocol.pledge(BETTORS[0], 10, active_bet, 1)

        assert protocol.get_bettors_on_team(active_bet, 1) == [
            BETTORS[2],
            BETTORS[0],
            BETTORS[1],
        ]

    def test_bets_by_bettor_in_first_pledge_order(self, protocol, active_bet):
        second = protocol.create_bet(OWNER, 2, 1, 20)
        protocol.set_bet_active(OWNER, second)

        protocol.pledge(BETTORS[0], 20, second, 2)
        protocol.pledge(BETTORS[0], 10, active_bet, 1)
        protocol.pledge(BETTORS[0], 20, second, 2)

        assert protocol.get_all_bets_by_bettor(BETTORS[0]) == [second, active_bet]

    def test_details_without_stake(self, protocol, active_bet):
        assert protocol.get_bettor_bet_details(active_bet, BETTORS[3]) == (0, 0)


# =============================================================================
# SETTLEMENT
# =============================================================================


class TestSettlement:
    @pytest.fixture
    def funded_bet(self, protocol, active_bet):
        """2 bettor × 10 на каждую сторону."""
        protocol.pledge(BETTORS[0], 10, active_bet, 1)
        protocol.pledge(BETTORS[1], 10, active_bet, 1)
        protocol.pledge(BETTORS[2], 10, active_bet, 2)
        protocol.pledge(BETTORS[3], 10, active_bet, 2)
        return active_bet

    def test_winners_receive_pool(self, protocol, funded_bet):
        schedule = protocol.settle(OWNER, funded_bet, 1)

        assert schedule.payouts == ((BETTORS[0], 20), (BETTORS[1], 20))
        assert protocol.token.balance_of(BETTORS[0]) == INITIAL_BALANCE + 10
        assert protocol.token.balance_of(BETTORS[1]) == INITIAL_BALANCE + 10
        assert protocol.token.balance_of(BETTORS[2]) == INITIAL_BALANCE - 10
        assert protocol.token.balance_of(BETTORS[3]) == INITIAL_BALANCE - 10
        assert custody_balance(protocol) == 0

        bet = protocol.get_bet(funded_bet)
        assert bet.status == BetStatus.COMPLETED
        assert bet.winner_team_id == 1

    def test_records_kept_after_settlement(self, protocol, funded_bet):
        protocol.settle(OWNER, funded_bet, 2)

        assert protocol.get_bettor_bet_details(funded_bet, BETTORS[0]) == (1, 10)
        assert protocol.get_total_amount_on_bet(funded_bet) == 40

    def test_replay_rejected(self, protocol, funded_bet):
        protocol.settle(OWNER, funded_bet, 1)

        with pytest.raises(StateConflictError, match="team already won"):
            protocol.settle(OWNER, funded_bet, 1)
        with pytest.raises(StateConflictError, match="team already won"):
            protocol.settle(OWNER, funded_bet, 2)

        assert protocol.token.balance_of(BETTORS[0]) == INITIAL_BALANCE + 10

    def test_non_owner_cannot_settle(self, protocol, funded_bet):
        with pytest.raises(AuthorizationError, match="Not owner"):
            protocol.settle(BETTORS[0], funded_bet, 1)

        assert protocol.get_bet(funded_bet).status == BetStatus.ACTIVE

    def test_invalid_winner(self, protocol, funded_bet):
        protocol.add_team(OWNER, "Team 3")

        with pytest.raises(LedgerValidationError, match="invalid teamId"):
            protocol.settle(OWNER, funded_bet, 3)

    def test_settle_inactive_bet(self, protocol, active_bet):
        pending = protocol.create_bet(OWNER, 1, 2, 10)

        with pytest.raises(StateConflictError, match="bet inactive"):
            protocol.settle(OWNER, pending, 1)

    def test_settle_invalid_bet(self, protocol, active_bet):
        with pytest.raises(LedgerValidationError, match="invalid bet id"):
            protocol.settle(OWNER, 3, 1)

    def test_pledge_after_settlement_rejected(self, protocol, funded_bet):
        protocol.settle(OWNER, funded_bet, 1)

        with pytest.raises(StateConflictError, match="bet inactive"):
            protocol.pledge(BETTORS[0], 10, funded_bet, 1)

    def test_uneven_pro_rata(self, protocol, active_bet):
        protocol.pledge(BETTORS[0], 10, active_bet, 1)
        protocol.pledge(BETTORS[1], 30, active_bet, 1)
        protocol.pledge(BETTORS[2], 25, active_bet, 2)

        schedule = protocol.settle(OWNER, active_bet, 1)

        assert schedule.payouts == ((BETTORS[0], 16), (BETTORS[1], 48))
        assert custody_balance(protocol) == 1

    def test_empty_winning_side_keeps_pool(self, protocol, active_bet):
        protocol.pledge(BETTORS[2], 10, active_bet, 2)
        protocol.pledge(BETTORS[3], 10, active_bet, 2)

        schedule = protocol.settle(OWNER, active_bet, 1)

        assert schedule.payouts == ()
        assert schedule.residue == 20
        assert custody_balance(protocol) == 20
        assert protocol.get_bet(active_bet).status == BetStatus.COMPLETED

    def test_settle_without_pledges(self, protocol, active_bet):
        schedule = protocol.settle(OWNER, active_bet, 2)

        assert schedule.pool == 0
        assert protocol.get_bet(active_bet).winner_team_id == 2

    def test_settlement_events(self, protocol, funded_bet):
        before = len(protocol.events)
        protocol.settle(OWNER, funded_bet, 1)

        new_events = protocol.events[before:]
        assert [e.event_type for e in new_events] == [
            EventType.BET_COMPLETED,
            EventType.PAYOUT_ISSUED,
            EventType.PAYOUT_ISSUED,
        ]
        assert new_events[0].team_id == 1
        assert [(e.bettor, e.amount) for e in new_events[1:]] == [
            (BETTORS[0], 20),
            (BETTORS[1], 20),
        ]


# =============================================================================
# READ SURFACE / SNAPSHOTS
# =============================================================================


class TestReadSurface:
    def test_reads_on_invalid_bet(self, protocol):
        with pytest.raises(LedgerValidationError, match="invalid bet id"):
            protocol.get_bet(0)
        with pytest.raises(LedgerValidationError, match="invalid bet id"):
            protocol.get_total_amount_on_bet(0)
        with pytest.raises(LedgerValidationError, match="invalid bet id"):
            protocol.get_bettor_bet_details(0, BETTORS[0])

    def test_reads_return_copies(self, protocol, active_bet):
        protocol.pledge(BETTORS[0], 10, active_bet, 1)

        protocol.get_bettors_on_team(active_bet, 1).append("0xintruder")
        protocol.get_all_bets_by_bettor(BETTORS[0]).append(99)
        protocol.events.clear()

        assert protocol.get_bettors_on_team(active_bet, 1) == [BETTORS[0]]
        assert protocol.get_all_bets_by_bettor(BETTORS[0]) == [active_bet]
        assert protocol.events

    def test_event_log_order(self, protocol, active_bet):
        protocol.pledge(BETTORS[0], 10, active_bet, 1)

        assert [e.event_type for e in protocol.events] == [
            EventType.TEAM_ADDED,
            EventType.TEAM_ADDED,
            EventType.BET_CREATED,
            EventType.BET_ACTIVE,
            EventType.FUNDS_PLEDGED,
        ]
        assert [e.seq for e in protocol.events] == list(range(5))


class TestSnapshots:
    def test_snapshot_round_trip(self, protocol, token, active_bet):
        protocol.pledge(BETTORS[0], 10, active_bet, 1)
        protocol.pledge(BETTORS[1], 30, active_bet, 2)
        protocol.pledge(BETTORS[0], 5 + 5, active_bet, 1)

        snapshot = protocol.snapshot()
        restored = BettingProtocol.from_snapshot(token.account(CUSTODY), snapshot)

        assert restored.owner == OWNER
        assert restored.team_count == protocol.team_count
        assert restored.get_bet(active_bet) == protocol.get_bet(active_bet)
        assert restored.get_bettor_bet_details(active_bet, BETTORS[0]) == (1, 20)
        assert restored.get_bettors_on_team(active_bet, 2) == [BETTORS[1]]
        assert restored.get_all_bets_by_bettor(BETTORS[0]) == [active_bet]
        assert restored.events == protocol.events

    def test_restored_ledger_settles(self, protocol, token, active_bet):
        protocol.pledge(BETTORS[0], 10, active_bet, 1)
        protocol.pledge(BETTORS[1], 10, active_bet, 2)

        restored = BettingProtocol.from_snapshot(token.account(CUSTODY), protocol.snapshot())
        restored.settle(OWNER, active_bet, 1)

        assert token.balance_of(BETTORS[0]) == INITIAL_BALANCE + 10

    def test_snapshot_is_json_serializable(self, protocol, active_bet):
        payload = protocol.snapshot().model_dump_json()

        assert '"payout_mode":"PUSH"' in payload


class TestTokenAccount:
    def test_account_must_match_custody_identity(self, token):
        with pytest.raises(ValueError, match="custody_identity"):
            BettingProtocol(token.account("0xsomeone"), OWNER)

    def test_custom_custody_identity(self):
        token = InMemoryToken()
        token.mint(BETTORS[0], 100)
        token.approve(BETTORS[0], "0xvault", 100)
        protocol = BettingProtocol(
            token.account("0xvault"), OWNER, LedgerConfig(custody_identity="0xvault")
        )
        protocol.add_team(OWNER, "Team 1")
        protocol.add_team(OWNER, "Team 2")
        protocol.create_bet(OWNER, 1, 2, 10)
        protocol.set_bet_active(OWNER, 0)

        protocol.pledge(BETTORS[0], 10, 0, 1)

        assert token.balance_of("0xvault") == 10
