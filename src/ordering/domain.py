"""Ordering bounded context — checkout pricing and order lifecycle.

Prices a checkout (cart quote, bonus redemption, delivery fee, promo code),
places the order and carries it through draft → pending → review →
finished/canceled with the compensating side effects of each transition.
"""

import logging

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logging.getLogger("protean").setLevel(logging.WARNING)

logger = structlog.get_logger(__name__)
