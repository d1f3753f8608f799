from constants import CRORE, CURRENCY_SYMBOL, LAKH


def _group_indian(amount: float) -> str:
    """Indian digit grouping (12,34,56,789) with up to three decimals."""
    text = f"{abs(amount):.3f}".rstrip("0").rstrip(".")
    integer_part, _, fraction = text.partition(".")

    head, tail = integer_part[:-3], integer_part[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail])

    if fraction:
        grouped = f"{grouped}.{fraction}"
    if amount < 0 and grouped != "0":
        grouped = "-" + grouped
    return grouped


def format_inr(amount: float) -> str:
    """
    Formats a rupee amount for display.

    Amounts of one crore and above are shown in crores, amounts of one lakh
    and above in lakhs (both with two decimals). Smaller amounts are written
    out in full with Indian digit grouping.
    """
    if amount >= CRORE:
        return f"{CURRENCY_SYMBOL}{amount / CRORE:.2f} Cr"
    if amount >= LAKH:
        return f"{CURRENCY_SYMBOL}{amount / LAKH:.2f} L"
    return CURRENCY_SYMBOL + _group_indian(amount)


def format_percent(rate: float, decimals: int = 1) -> str:
    return f"{rate * 100:.{decimals}f}%"
