"""Acquirer fee and automatic investment calculation."""

from decimal import Decimal

from ledgerbook.domain.entities import (
    DIGITAL_CHANNELS,
    RATED_CHANNELS,
    FeeBreakdown,
    FeeConfiguration,
    SalesRecord,
)
from ledgerbook.domain.errors import ValidationError

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def calculate_fees(record: SalesRecord, config: FeeConfiguration) -> FeeBreakdown:
    """Compute fee, net digital amount and investment for one day of sales.

    The fee is charged on card and QR-code pix channels only. Manual pix and
    cash carry no fee and do not take part in the investment base.

    Args:
        record: Sales of one day
        config: Rates on a 0-100 scale

    Returns:
        FeeBreakdown with unrounded Decimal amounts
    """
    fee = sum(
        (record.channel(name) * config.rate(name) / HUNDRED for name in RATED_CHANNELS),
        ZERO,
    )
    rated_total = sum((record.channel(name) for name in RATED_CHANNELS), ZERO)
    net_digital = rated_total - fee

    investment = ZERO
    if net_digital > 0:
        investment = net_digital * config.investment_percentage / HUNDRED

    return FeeBreakdown(fee=fee, net_digital=net_digital, investment=investment)


def digital_total(record: SalesRecord) -> Decimal:
    """Sum of every non-cash channel, manual pix included."""
    return sum((record.channel(name) for name in DIGITAL_CHANNELS), ZERO)


def validate_fee_configuration(config: FeeConfiguration) -> FeeConfiguration:
    """Check every rate and the investment share are on the 0-100 scale.

    Raises:
        ValidationError: If a percentage is outside 0-100
    """
    for name in RATED_CHANNELS + ("investment_percentage",):
        value = getattr(config, name)
        if not value.is_finite() or not ZERO <= value <= HUNDRED:
            raise ValidationError(f"{name} must be between 0 and 100, got {value}")
    return config
