"""
Pricing rules for heating-oil orders.

VAT is already included in quoted totals, so it is extracted (gross-to-net)
rather than added on top.
"""

from typing import Optional

# Fixed conversion rates to EUR
EXCHANGE_RATES_TO_EUR = {
    "EUR": 1.0,
    "PLN": 0.233,
}
DEFAULT_EXCHANGE_RATE = 1.0


def calculate_vat_amount(total_amount: float, vat_rate: Optional[float]) -> float:
    """
    Extract the VAT contained in a tax-inclusive total.

    Args:
        total_amount: Gross total
        vat_rate: VAT percentage, e.g. 19 (None or 0 means no VAT)

    Returns:
        float: ``total * rate / (100 + rate)``, or 0 when the rate is not positive

    Example:
        >>> calculate_vat_amount(119.0, 19)
        19.0
    """
    rate = float(vat_rate or 0)
    if rate <= 0:
        return 0.0
    return float(total_amount) * rate / (100 + rate)


def calculate_order_totals(liters: float, price_per_liter: float, delivery_fee: float) -> tuple[float, float]:
    """
    Compute the priced line of an order.

    Args:
        liters: Quantity
        price_per_liter: Unit price
        delivery_fee: Flat delivery fee

    Returns:
        tuple: (base_price, total_amount)
    """
    base_price = float(liters) * float(price_per_liter)
    total_amount = base_price + float(delivery_fee)
    return base_price, total_amount


def get_exchange_rate(currency: Optional[str]) -> float:
    """
    Fixed rate converting an amount in ``currency`` to EUR.

    Unknown currencies fall back to 1.0.
    """
    return EXCHANGE_RATES_TO_EUR.get((currency or "EUR").upper(), DEFAULT_EXCHANGE_RATE)
