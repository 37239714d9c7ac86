"""Transfer capability: external calls whose boolean result gates the operation"""
import logging

from .errors import BurnFailed, MintFailed, TransferFailed
from .interfaces import AssetLedger, StableUnitLedger

logger = logging.getLogger(__name__)


class Transfers:
    """Runs token calls on behalf of the engine address and raises on a false return.

    Exceptions thrown by the token itself propagate unchanged; either way the
    enclosing engine operation aborts.
    """

    def __init__(self, engine_address: str):
        self.engine_address = engine_address

    def pull(self, token: AssetLedger, owner: str, amount: int) -> None:
        """Move amount from owner into engine custody (requires allowance)"""
        if not token.transfer_from(self.engine_address, owner, self.engine_address, amount):
            logger.warning("transfer_from %s -> engine of %d reported failure", owner, amount)
            raise TransferFailed(f"Pulling {amount} from {owner} failed")

    def push(self, token: AssetLedger, to: str, amount: int) -> None:
        """Move amount out of engine custody"""
        if not token.transfer(self.engine_address, to, amount):
            logger.warning("transfer engine -> %s of %d reported failure", to, amount)
            raise TransferFailed(f"Sending {amount} to {to} failed")

    def mint(self, stable: StableUnitLedger, to: str, amount: int) -> None:
        if not stable.mint(self.engine_address, to, amount):
            logger.warning("mint of %d to %s reported failure", amount, to)
            raise MintFailed(f"Minting {amount} to {to} failed")

    def burn(self, stable: StableUnitLedger, amount: int) -> None:
        """Burn amount from the engine's own stable unit balance"""
        if not stable.burn(self.engine_address, amount):
            logger.warning("burn of %d reported failure", amount)
            raise BurnFailed(f"Burning {amount} failed")
