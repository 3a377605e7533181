from decimal import ROUND_HALF_UP, Decimal

from storefront.config import settings


def quantize(v: Decimal, places: int | None = None) -> Decimal:
    places = settings.decimals if places is None else places
    return Decimal(v).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def money(v: Decimal) -> str:
    return f"${quantize(v)}"


def percent(fraction: Decimal) -> str:
    # 0.1 -> "10%", 0.125 -> "12.5%"
    pct = (Decimal(fraction) * 100).normalize()
    return f"{pct:f}%"


def minor_units(v: Decimal) -> int:
    return int(quantize(Decimal(v) * 100, 0))
