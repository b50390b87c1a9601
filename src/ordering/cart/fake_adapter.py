"""Configurable fake cart service for development and testing.

Products are registered with their price, an optional discounted price, the
sale step and the bonus points a unit earns. Unknown products come back in
``deleted_list``.
"""

from ordering.cart.port import CartService
from ordering.cart.quote import CartLine, CartQuote, CartRequestLine
from ordering.shared.language import Language


class FakeCartService(CartService):
    def __init__(self) -> None:
        self.products: dict[str, dict] = {}
        self.calls: list[dict] = []

    def register_product(
        self,
        product_id: str,
        price: float,
        discounted_price: float | None = None,
        step: int = 1,
        bonus: int = 0,
        image: str | None = None,
        partner: str | None = None,
    ) -> None:
        self.products[product_id] = {
            "price": price,
            "discounted_price": discounted_price,
            "step": step,
            "bonus": bonus,
            "image": image,
            "partner": partner,
        }

    def quote(
        self,
        lines: list[CartRequestLine],
        language: Language = Language.EN,
        customer_id: str | None = None,
    ) -> CartQuote:
        self.calls.append({"method": "quote", "lines": list(lines), "customer_id": customer_id})

        priced, deleted = [], []
        sub_total = total = 0.0
        bonus = 0
        for requested in lines:
            product = self.products.get(requested.product_id)
            if product is None:
                deleted.append(requested.product_id)
                continue

            line = CartLine(
                product_id=requested.product_id,
                product_version_id=requested.product_version_id,
                price=product["price"],
                discounted_price=product["discounted_price"],
                count=requested.count,
                step=product["step"],
                step_count=requested.count // product["step"],
                image=product["image"],
                partner=product["partner"],
            )
            priced.append(line)
            sub_total += line.price * line.count
            total += line.unit_price * line.count
            bonus += product["bonus"] * line.count

        return CartQuote(
            sub_total=sub_total,
            discount=sub_total - total,
            total=total,
            lines=tuple(priced),
            deleted_list=tuple(deleted),
            bonus=bonus,
        )

    def reset(self) -> None:
        self.products.clear()
        self.calls.clear()
