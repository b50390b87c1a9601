"""Cart quote value types returned by the cart service.

Quotes are immutable: pricing reads them, and order placement copies their
lines onto the order.
"""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class CartRequestLine:
    """A product the buyer wants, as sent by the client."""

    product_id: str
    count: int
    product_version_id: str | None = None


@dataclass(frozen=True)
class CartLine:
    product_id: str
    price: float
    count: int
    product_version_id: str | None = None
    discounted_price: float | None = None
    step: int = 1
    step_count: int = 1
    image: str | None = None
    partner: str | None = None

    @property
    def unit_price(self) -> float:
        return self.discounted_price if self.discounted_price is not None else self.price

    def as_order_line(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CartQuote:
    """Priced cart: ``total == sub_total - discount``.

    ``deleted_list`` names requested products that no longer exist; ``bonus``
    is the number of points the order will earn when finished.
    """

    sub_total: float = 0.0
    discount: float = 0.0
    total: float = 0.0
    lines: tuple[CartLine, ...] = ()
    deleted_list: tuple[str, ...] = ()
    bonus: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.lines
