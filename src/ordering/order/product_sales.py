"""ProductSales aggregate — how many finished orders contained each product."""

from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ordering.domain import ordering


@ordering.aggregate
class ProductSales:
    product_id = Identifier(identifier=True)
    bought_count = Integer(default=0, min_value=0)

    def record_purchase(self) -> None:
        self.bought_count += 1


def record_purchases(product_ids) -> None:
    """Bump the bought count of each distinct product once."""
    repo = current_domain.repository_for(ProductSales)
    for product_id in dict.fromkeys(str(p) for p in product_ids):
        try:
            sales = repo.get(product_id)
        except ObjectNotFoundError:
            sales = ProductSales(product_id=product_id, bought_count=0)
        sales.record_purchase()
        repo.add(sales)
