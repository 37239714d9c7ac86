"""In-memory fungible token ledgers: collateral tokens and the stable unit"""
import logging
from typing import Dict, Tuple

from .constants import ZERO_ADDRESS
from .errors import ProtocolError

logger = logging.getLogger(__name__)


class TokenError(ProtocolError):
    """Base error class for token ledger reverts"""
    pass

class InsufficientBalance(TokenError):
    pass

class InsufficientAllowance(TokenError):
    pass

class ZeroAddress(TokenError):
    pass

class NotOwner(TokenError):
    pass

class MustBeMoreThanZero(TokenError):
    pass


class ERC20Token:
    """Balances and allowances; every call names its caller explicitly"""

    def __init__(self, name: str, symbol: str, address: str, decimals: int = 18):
        self.name = name
        self.symbol = symbol
        self.address = address
        self.decimals = decimals
        self.total_supply = 0
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        if spender == ZERO_ADDRESS:
            raise ZeroAddress("Cannot approve the zero address")
        self._allowances[(caller, spender)] = amount
        return True

    def transfer(self, caller: str, to: str, amount: int) -> bool:
        self._move(caller, to, amount)
        return True

    def transfer_from(self, caller: str, owner: str, to: str, amount: int) -> bool:
        allowed = self.allowance(owner, caller)
        if amount > allowed:
            raise InsufficientAllowance(f"{caller} may spend {allowed} of {owner}'s {self.symbol}, not {amount}")
        self._allowances[(owner, caller)] = allowed - amount
        self._move(owner, to, amount)
        return True

    def _move(self, sender: str, to: str, amount: int) -> None:
        if to == ZERO_ADDRESS:
            raise ZeroAddress("Cannot transfer to the zero address")
        balance = self.balance_of(sender)
        if amount > balance:
            raise InsufficientBalance(f"{sender} holds {balance} {self.symbol}, cannot send {amount}")
        self._balances[sender] = balance - amount
        self._balances[to] = self.balance_of(to) + amount

    def _mint(self, to: str, amount: int) -> None:
        if to == ZERO_ADDRESS:
            raise ZeroAddress("Cannot mint to the zero address")
        self._balances[to] = self.balance_of(to) + amount
        self.total_supply += amount

    def _burn(self, account: str, amount: int) -> None:
        balance = self.balance_of(account)
        if amount > balance:
            raise InsufficientBalance(f"{account} holds {balance} {self.symbol}, cannot burn {amount}")
        self._balances[account] = balance - amount
        self.total_supply -= amount

    def faucet(self, to: str, amount: int) -> None:
        """Test helper: create collateral out of thin air"""
        self._mint(to, amount)


class StableUnitToken(ERC20Token):
    """The stable unit; only its owner (the engine after deployment) can mint or burn"""

    def __init__(self, owner: str, address: str, name: str = "Decentralized Stable Coin", symbol: str = "DSC"):
        super().__init__(name, symbol, address)
        self.owner = owner

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self._only_owner(caller)
        if new_owner == ZERO_ADDRESS:
            raise ZeroAddress("New owner is the zero address")
        logger.info("%s ownership transferred from %s to %s", self.symbol, self.owner, new_owner)
        self.owner = new_owner

    def mint(self, caller: str, to: str, amount: int) -> bool:
        self._only_owner(caller)
        if to == ZERO_ADDRESS:
            raise ZeroAddress("Cannot mint to the zero address")
        if amount <= 0:
            raise MustBeMoreThanZero("Mint amount must be more than zero")
        self._mint(to, amount)
        return True

    def burn(self, caller: str, amount: int) -> bool:
        """Burn from the caller's own balance"""
        self._only_owner(caller)
        if amount <= 0:
            raise MustBeMoreThanZero("Burn amount must be more than zero")
        if self.balance_of(caller) < amount:
            raise InsufficientBalance("Burn amount exceeds balance")
        self._burn(caller, amount)
        return True

    def _only_owner(self, caller: str) -> None:
        if caller != self.owner:
            raise NotOwner(f"{caller} is not the owner of {self.symbol}")
