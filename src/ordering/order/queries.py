"""Read-side order lookups: guest order lookup, customer order lists, code uniqueness."""

from protean.utils.globals import current_domain

from ordering.customer.lookup import find_guest_by_email
from ordering.order.order import ACTIVE_STATUSES, HISTORY_STATUSES, Order, OrderStatus


def is_order_code_taken(code: str) -> bool:
    return current_domain.repository_for(Order)._dao.query.filter(code=code).count() > 0


def get_guest_order_id(email: str, code: str) -> str | None:
    """Id of the guest's order with this lookup code. Draft orders are never returned."""
    guest = find_guest_by_email(email)
    if guest is None or not code:
        return None

    repo = current_domain.repository_for(Order)
    orders = repo._dao.query.filter(guest_id=str(guest.id), code=code.strip().upper()).limit(None).all().items
    order = next((o for o in orders if o.status != OrderStatus.DRAFT.value), None)
    return str(order.id) if order is not None else None


def _summary(order: Order) -> dict:
    return {
        "id": str(order.id),
        "code": order.code,
        "status": order.status,
        "total": order.total,
        "delivery_type": order.delivery_type,
        "payment_type": order.payment_type,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "finished_at": order.finished_at.isoformat() if order.finished_at else None,
        "canceled_at": order.canceled_at.isoformat() if order.canceled_at else None,
    }


def list_customer_orders(customer_id: str, active: bool = True, page_no: int = 1, limit: int = 20) -> dict:
    """A customer's active (pending/review) or past (finished/canceled) orders, newest first."""
    statuses = {s.value for s in (ACTIVE_STATUSES if active else HISTORY_STATUSES)}
    repo = current_domain.repository_for(Order)
    owned = repo._dao.query.filter(customer_id=str(customer_id)).limit(None).all().items
    orders = [o for o in owned if o.status in statuses]
    orders.sort(key=lambda o: o.created_at, reverse=True)

    start = (max(page_no, 1) - 1) * limit
    return {
        "items": [_summary(o) for o in orders[start : start + limit]],
        "total": len(orders),
        "page_no": page_no,
        "limit": limit,
    }
