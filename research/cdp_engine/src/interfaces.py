"""Protocols for the engine's external collaborators."""
from typing import Protocol, Tuple


class AssetLedger(Protocol):
    """Fungible token ledger holding a collateral asset."""

    address: str

    def balance_of(self, account: str) -> int: ...

    def transfer(self, caller: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, caller: str, owner: str, to: str, amount: int) -> bool: ...


class StableUnitLedger(AssetLedger, Protocol):
    """Token ledger for the stable unit; the engine must own it to mint."""

    def mint(self, caller: str, to: str, amount: int) -> bool: ...

    def burn(self, caller: str, amount: int) -> bool: ...


class PriceFeed(Protocol):
    """Read-only aggregator feed quoting one asset in USD."""

    address: str

    def decimals(self) -> int: ...

    def latest_round_data(self) -> Tuple[int, int, int, int, int]:
        """(round_id, answer, started_at, updated_at, answered_in_round)"""
        ...
