"""Delivery fee preview — command and handler."""

from protean import handle
from protean.fields import Float, Integer

from ordering.delivery.fee import resolve_delivery_fee
from ordering.delivery.geo.port import Coordinates
from ordering.delivery.zone import DeliveryZone
from ordering.domain import ordering
from ordering.shared.result import ok


@ordering.command(part_of="DeliveryZone")
class CheckDeliveryFee:
    lat = Float(required=True, min_value=-90.0, max_value=90.0)
    lng = Float(required=True, min_value=-180.0, max_value=180.0)
    price = Float(required=True, min_value=0.0)
    language = Integer(default=1)


@ordering.command_handler(part_of=DeliveryZone)
class CheckDeliveryFeeHandler:
    @handle(CheckDeliveryFee)
    def check_delivery_fee(self, command):
        fee = resolve_delivery_fee(Coordinates(command.lat, command.lng), command.price)
        return ok(data={"delivery_fee": fee})
