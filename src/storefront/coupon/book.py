"""Coupon book — a read-only table of coupon codes and their percentages.

Coupons are not persisted. A code maps to a fixed percentage discount in
(0, 100] with no expiry, usage limit or per-customer restriction. Codes are
matched case-insensitively by upper-casing both the table keys and the
looked-up code.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

DEFAULT_COUPONS = {
    "SAVE10": 10,
    "SAVE15": 15,
    "SAVE20": 20,
}


@dataclass(frozen=True)
class Coupon:
    """A coupon code that matched the book."""

    code: str
    percentage: int | float


class CouponBook:
    """Immutable code → percentage lookup."""

    def __init__(self, coupons: Mapping[str, int | float]):
        table = {}
        for code, percentage in coupons.items():
            normalized = str(code).strip().upper()
            if not normalized:
                raise ValueError("Coupon codes cannot be blank")
            if isinstance(percentage, bool) or not isinstance(percentage, int | float):
                raise ValueError(f"Coupon {normalized} percentage must be a number, got {percentage!r}")
            if not 0 < percentage <= 100:
                raise ValueError(f"Coupon {normalized} percentage must be in (0, 100], got {percentage}")
            table[normalized] = percentage
        self._coupons = MappingProxyType(table)

    @classmethod
    def from_config(cls, config: Mapping) -> "CouponBook":
        """Build the book from a domain config, falling back to the defaults."""
        custom = config.get("custom") or {}
        coupons = custom.get("coupons") if isinstance(custom, Mapping) else None
        return cls(coupons or DEFAULT_COUPONS)

    def lookup(self, code: str | None) -> Coupon | None:
        """Return the matching coupon, or None when the code is unknown."""
        if not code:
            return None
        normalized = code.strip().upper()
        percentage = self._coupons.get(normalized)
        if percentage is None:
            return None
        return Coupon(code=normalized, percentage=percentage)

    @property
    def codes(self) -> tuple[str, ...]:
        return tuple(sorted(self._coupons))

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip().upper() in self._coupons

    def __len__(self) -> int:
        return len(self._coupons)
