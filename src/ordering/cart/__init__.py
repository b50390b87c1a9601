"""Cart service factory.

Provides get_cart_service() / set_cart_service() to swap implementations.
The fake service is the default until a catalogue-backed adapter is set.
"""

from ordering.cart.fake_adapter import FakeCartService
from ordering.cart.port import CartService

_current_cart_service: CartService | None = None


def get_cart_service() -> CartService:
    global _current_cart_service
    if _current_cart_service is None:
        _current_cart_service = FakeCartService()
    return _current_cart_service


def set_cart_service(cart_service: CartService) -> None:
    """Override the active cart service (useful for tests)."""
    global _current_cart_service
    _current_cart_service = cart_service


def reset_cart_service() -> None:
    global _current_cart_service
    _current_cart_service = None
