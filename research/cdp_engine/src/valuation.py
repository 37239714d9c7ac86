"""Conversions between collateral amounts and USD value"""
from .constants import PRECISION
from .fixed_point import mul_div
from .oracle import OracleAdapter, Price


def usd_value_at(amount: int, price: Price) -> int:
    """USD value (18 decimals) of amount at price, rounded down"""
    return mul_div(amount, price.value, PRECISION)

def amount_from_usd_at(usd: int, price: Price) -> int:
    """Token amount worth usd at price, rounded down"""
    return mul_div(usd, PRECISION, price.value)


class Valuator:
    """Prices every conversion with a fresh oracle read"""

    def __init__(self, oracle: OracleAdapter):
        self.oracle = oracle

    def usd_value(self, token: str, amount: int) -> int:
        return usd_value_at(amount, self.oracle.get_price(token))

    def amount_from_usd(self, token: str, usd: int) -> int:
        return amount_from_usd_at(usd, self.oracle.get_price(token))
