# budgetwise_client/utils/formatting.py

import math

CURRENCY_SYMBOL = "₹"


def format_currency(amount, symbol=CURRENCY_SYMBOL, grouping=True):
    """₹1,234.50 style; anything that is not a finite number renders as ''."""
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return ""
    if math.isnan(amount) or math.isinf(amount):
        return ""
    sign = "-" if amount < 0 else ""
    body = f"{abs(amount):,.2f}" if grouping else f"{abs(amount):.2f}"
    return f"{sign}{symbol}{body}"
