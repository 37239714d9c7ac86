"""Custom errors for the stable unit engine"""

class ProtocolError(Exception):
    """Base error class for protocol errors"""
    pass

class ArithmeticOverflowError(ProtocolError):
    """Error for arithmetic overflow/underflow or division by zero"""
    pass

class NeedsMoreThanZero(ProtocolError):
    """Error for zero amounts passed to a mutating entry point"""
    pass

class NotAllowedToken(ProtocolError):
    """Error for assets that were not registered as collateral"""

    def __init__(self, token: str):
        super().__init__(f"Token {token} is not allowed as collateral")
        self.token = token

class TokenAddressesAndPriceFeedAddressesMustBeSameLength(ProtocolError):
    """Error for mismatched construction lists"""
    pass

class TransferFailed(ProtocolError):
    """Error for a collateral or stable unit transfer reporting failure"""
    pass

class MintFailed(ProtocolError):
    """Error for the stable unit ledger refusing to mint"""
    pass

class BurnFailed(ProtocolError):
    """Error for the stable unit ledger refusing to burn"""
    pass

class InvalidPriceError(ProtocolError):
    """Error for invalid or stale price data"""
    pass

class StaleOracleData(InvalidPriceError):
    """Error for price readings older than the staleness window or from incomplete rounds"""

    def __init__(self, asset: str, age: int):
        super().__init__(f"Price for {asset} is stale ({age}s old)")
        self.asset = asset
        self.age = age

class UnknownAsset(InvalidPriceError):
    """Error for a price lookup on an unregistered asset"""

    def __init__(self, asset: str):
        super().__init__(f"No price feed registered for {asset}")
        self.asset = asset

class InsufficientCollateral(ProtocolError):
    """Error for insufficient collateral"""
    pass

class InsufficientDebt(ProtocolError):
    """Error for repaying more debt than was minted"""
    pass

class BreakHealthFactor(ProtocolError):
    """Error for operations leaving an account below the minimum health factor"""

    def __init__(self, health_factor: int):
        super().__init__(f"Health factor broken: {health_factor}")
        self.health_factor = health_factor

class HealthFactorOk(ProtocolError):
    """Error for liquidating an account that is not undercollateralized"""

    def __init__(self, health_factor: int):
        super().__init__(f"Health factor is ok: {health_factor}")
        self.health_factor = health_factor

class HealthFactorNotImproved(ProtocolError):
    """Error for liquidations that do not raise the target's health factor"""

    def __init__(self, starting: int, ending: int):
        super().__init__(f"Health factor not improved: {starting} -> {ending}")
        self.starting = starting
        self.ending = ending

class ReentrantCall(ProtocolError):
    """Error for an external call re-entering the engine mid-operation"""
    pass
