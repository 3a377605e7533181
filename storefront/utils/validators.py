from decimal import Decimal


def require_non_negative(v: Decimal, name: str = "value") -> None:
    if v < 0:
        raise ValueError(f"{name} must be >= 0")


def is_discount_fraction(v) -> bool:
    try:
        d = Decimal(str(v))
    except (ArithmeticError, ValueError):
        return False
    if not d.is_finite():
        return False
    return Decimal(0) <= d < Decimal(1)
