"""Cart service port (abstract interface).

The catalogue owns product prices; checkout only asks it to price a list of
requested products for a buyer.
"""

from abc import ABC, abstractmethod

from ordering.cart.quote import CartQuote, CartRequestLine
from ordering.shared.language import Language


class CartService(ABC):
    @abstractmethod
    def quote(
        self,
        lines: list[CartRequestLine],
        language: Language = Language.EN,
        customer_id: str | None = None,
    ) -> CartQuote:
        """Price the requested lines for the buyer."""
        ...
