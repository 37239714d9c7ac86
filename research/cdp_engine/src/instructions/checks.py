"""Input validation shared by every mutating instruction"""
from ..errors import NeedsMoreThanZero


def require_more_than_zero(amount: int) -> None:
    if amount <= 0:
        raise NeedsMoreThanZero(f"Amount must be more than zero, got {amount}")
