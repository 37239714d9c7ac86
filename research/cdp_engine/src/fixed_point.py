"""Checked integer arithmetic for 18 decimal fixed point values"""
from .constants import U256_MAX
from .errors import ArithmeticOverflowError


def checked_add(a: int, b: int) -> int:
    """Add with overflow checking"""
    result = a + b
    if result > U256_MAX:
        raise ArithmeticOverflowError("Arithmetic overflow in addition")
    return result

def checked_sub(a: int, b: int) -> int:
    """Subtract with underflow checking"""
    if b > a:
        raise ArithmeticOverflowError("Arithmetic underflow in subtraction")
    return a - b

def checked_mul(a: int, b: int) -> int:
    """Multiply with overflow checking"""
    result = a * b
    if result > U256_MAX:
        raise ArithmeticOverflowError("Arithmetic overflow in multiplication")
    return result

def checked_div(a: int, b: int) -> int:
    """Divide with zero checking, truncating toward zero"""
    if b == 0:
        raise ArithmeticOverflowError("Division by zero")
    return a // b

def mul_div(a: int, b: int, denominator: int) -> int:
    """a * b / denominator, floored, with every intermediate bounded to 256 bits"""
    return checked_div(checked_mul(a, b), denominator)
