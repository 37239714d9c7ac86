"""Position state management"""
import copy
from dataclasses import dataclass, field
from typing import Dict

from ..errors import InsufficientCollateral, InsufficientDebt


@dataclass
class Position:
    """Represents one account's collateral balances and minted debt"""
    collateral_deposited: Dict[str, int] = field(default_factory=dict)  # token -> amount
    debt_minted: int = 0  # stable units, 18 decimals

    def is_empty(self) -> bool:
        return self.debt_minted == 0 and not any(self.collateral_deposited.values())


class PositionLedger:
    """Per-account bookkeeping; makes no external calls.

    Accounts are created implicitly on first write. A zeroed account is
    indistinguishable from one that never existed.
    """

    def __init__(self):
        self._positions: Dict[str, Position] = {}

    def _position(self, account: str) -> Position:
        position = self._positions.get(account)
        if position is None:
            position = self._positions[account] = Position()
        return position

    def add_collateral(self, account: str, token: str, amount: int) -> None:
        position = self._position(account)
        position.collateral_deposited[token] = position.collateral_deposited.get(token, 0) + amount

    def remove_collateral(self, account: str, token: str, amount: int) -> None:
        balance = self.collateral_balance(account, token)
        if amount > balance:
            raise InsufficientCollateral(
                f"{account} has {balance} of {token}, cannot remove {amount}"
            )
        self._position(account).collateral_deposited[token] = balance - amount

    def increase_debt(self, account: str, amount: int) -> None:
        self._position(account).debt_minted += amount

    def decrease_debt(self, account: str, amount: int) -> None:
        debt = self.debt(account)
        if amount > debt:
            raise InsufficientDebt(f"{account} owes {debt}, cannot repay {amount}")
        self._position(account).debt_minted = debt - amount

    def collateral_balance(self, account: str, token: str) -> int:
        position = self._positions.get(account)
        if position is None:
            return 0
        return position.collateral_deposited.get(token, 0)

    def debt(self, account: str) -> int:
        position = self._positions.get(account)
        return position.debt_minted if position is not None else 0

    def accounts(self):
        """Accounts holding collateral or debt"""
        return [account for account, position in self._positions.items() if not position.is_empty()]

    def snapshot(self) -> Dict[str, Position]:
        return copy.deepcopy(self._positions)

    def restore(self, snapshot: Dict[str, Position]) -> None:
        self._positions = snapshot
