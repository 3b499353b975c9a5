from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_amount(value) -> float:
    """Coerce a stored amount (DECIMAL column, str, int) to a float."""
    if value is None:
        raise ValueError("missing money value")

    if isinstance(value, str):
        normalized = value.strip()
        if not normalized:
            raise ValueError("empty money value")
        try:
            value = Decimal(normalized)
        except InvalidOperation as exc:
            raise ValueError("invalid money value") from exc

    return float(value)


def round_money(value) -> float:
    """Round to cents for display. Calculations never call this."""
    amount = Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    return float(amount)
