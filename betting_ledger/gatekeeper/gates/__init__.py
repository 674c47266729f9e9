"""Gates — индивидуальные гейты Gatekeeper системы.

- GATE 0: Operator Access (все мутации оператора)
- GATE 1: Bet Creation
- GATE 2: Pledge Validation
- GATE 3: Settlement Validation
- GATE 4: Claim Validation (PULL режим выплат)
- GATE 5: Payout Resume (PUSH режим выплат)
"""

from .gate_00_operator_access import Gate00OperatorAccess, Gate00Result
from .gate_01_bet_creation import Gate01BetCreation, Gate01Result
from .gate_02_pledge_validation import Gate02PledgeValidation, Gate02Result
from .gate_03_settlement_validation import Gate03SettlementValidation, Gate03Result
from .gate_04_claim_validation import Gate04ClaimValidation, Gate04Result
from .gate_05_payout_resume import Gate05PayoutResume, Gate05Result

__all__ = [
    "Gate00OperatorAccess",
    "Gate00Result",
    "Gate01BetCreation",
    "Gate01Result",
    "Gate02PledgeValidation",
    "Gate02Result",
    "Gate03SettlementValidation",
    "Gate03Result",
    "Gate04ClaimValidation",
    "Gate04Result",
    "Gate05PayoutResume",
    "Gate05Result",
]
