"""Order lifecycle after placement: status changes and deletion."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from sales.domain import sales
from sales.order.order import Order
from shared.errors import NotFound


@sales.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    tracking_number = String(max_length=100)
    carrier = String(max_length=100)


@sales.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)


def _load(order_id) -> Order:
    order = current_domain.repository_for(Order).find(order_id)
    if order is None:
        raise NotFound("Order not found", field="orderId")
    return order


@sales.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        order = _load(command.order_id)
        order.change_status(
            command.status,
            tracking_number=command.tracking_number,
            carrier=command.carrier,
        )
        current_domain.repository_for(Order).add(order)

    @handle(DeleteOrder)
    def delete_order(self, command):
        order = _load(command.order_id)
        order.assert_deletable()
        current_domain.repository_for(Order)._dao.delete(order)
