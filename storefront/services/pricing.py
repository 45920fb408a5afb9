# storefront/services/pricing.py
from dataclasses import dataclass
from typing import Protocol

from storefront.core.config import get_settings


@dataclass(frozen=True)
class OrderCharges:
    subtotal: float
    shipping_cost: float
    tax_amount: float

    @property
    def total_amount(self) -> float:
        return round(self.subtotal + self.shipping_cost + self.tax_amount, 2)


class PricingPolicy(Protocol):
    def charges(self, subtotal: float) -> OrderCharges: ...


class FlatRatePricing:
    """
    Flat shipping fee (waived at or above the free-shipping threshold)
    plus a proportional tax on the subtotal.
    """

    def __init__(
        self,
        shipping_fee: float = 0.0,
        free_shipping_threshold: float | None = None,
        tax_rate: float = 0.0,
    ):
        self.shipping_fee = shipping_fee
        self.free_shipping_threshold = free_shipping_threshold
        self.tax_rate = tax_rate

    @classmethod
    def from_settings(cls) -> "FlatRatePricing":
        settings = get_settings()
        return cls(
            shipping_fee=settings.SHIPPING_FLAT_FEE,
            free_shipping_threshold=settings.FREE_SHIPPING_THRESHOLD,
            tax_rate=settings.TAX_RATE,
        )

    def charges(self, subtotal: float) -> OrderCharges:
        subtotal = round(subtotal, 2)
        shipping = self.shipping_fee
        if (
            self.free_shipping_threshold is not None
            and subtotal >= self.free_shipping_threshold
        ):
            shipping = 0.0
        tax = round(subtotal * self.tax_rate, 2)
        return OrderCharges(
            subtotal=subtotal,
            shipping_cost=round(shipping, 2),
            tax_amount=tax,
        )
