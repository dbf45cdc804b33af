"""Credit policy rules

Pure functions shared by the credit limit guard and the debtor queries.
A credit limit of 0 means the customer has no ceiling.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

UNLIMITED = "unlimited"

DEFAULT_ALERT_THRESHOLD = Decimal("70")
DEFAULT_CRITICAL_THRESHOLD = Decimal("90")


class RiskTier(str, Enum):
    """Debtor risk classification by credit usage"""
    NORMAL = "normal"        # Below the alert threshold
    ALERT = "alert"          # Between alert and critical thresholds
    CRITICAL = "critical"    # At or above critical threshold, or over limit


def is_within_limit(credit_limit: Decimal, current_debt: Decimal, additional: Decimal) -> bool:
    """True when adding `additional` keeps the debt within the ceiling"""
    if credit_limit == 0:
        return True
    return current_debt + additional <= credit_limit


def available_credit(credit_limit: Decimal, current_debt: Decimal) -> Union[Decimal, str]:
    """Remaining headroom, negative when over limit, or UNLIMITED"""
    if credit_limit == 0:
        return UNLIMITED
    return credit_limit - current_debt


def usage_percentage(credit_limit: Decimal, current_debt: Decimal) -> Optional[Decimal]:
    if credit_limit == 0:
        return None
    return (current_debt * 100 / credit_limit).quantize(Decimal("0.01"))


def classify_risk(
    credit_limit: Decimal,
    current_debt: Decimal,
    alert_threshold: Decimal = DEFAULT_ALERT_THRESHOLD,
    critical_threshold: Decimal = DEFAULT_CRITICAL_THRESHOLD,
) -> RiskTier:
    """
    Classify a debtor by how much of the credit limit is used

    Unlimited accounts have no ceiling to approach and are always NORMAL.
    """
    if credit_limit == 0:
        return RiskTier.NORMAL
    if current_debt > credit_limit:
        return RiskTier.CRITICAL

    percentage = current_debt * 100 / credit_limit
    if percentage >= critical_threshold:
        return RiskTier.CRITICAL
    if percentage >= alert_threshold:
        return RiskTier.ALERT
    return RiskTier.NORMAL
