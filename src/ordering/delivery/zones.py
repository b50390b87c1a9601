"""Delivery zone administration — command and handler."""

from protean import handle
from protean.fields import Float, String
from protean.utils.globals import current_domain

from ordering.delivery.zone import DeliveryZone
from ordering.domain import ordering


@ordering.command(part_of="DeliveryZone")
class AddDeliveryZone:
    name = String(required=True, max_length=255)
    lat = Float(required=True)
    lng = Float(required=True)
    price = Float(required=True, min_value=0.0)
    is_free_from_price = Float(required=True, min_value=0.0)


@ordering.command_handler(part_of=DeliveryZone)
class DeliveryZoneHandler:
    @handle(AddDeliveryZone)
    def add_delivery_zone(self, command):
        zone = DeliveryZone(
            name=command.name,
            lat=command.lat,
            lng=command.lng,
            price=command.price,
            is_free_from_price=command.is_free_from_price,
        )
        current_domain.repository_for(DeliveryZone).add(zone)
        return str(zone.id)
