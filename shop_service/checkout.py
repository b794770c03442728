# shop_service/checkout.py
"""Checkout: turn a user's cart into a pending order.

One pass per request, nothing persisted in between, nothing resumable:

    validate -> persist order -> clear cart -> dispatch notice -> done

The order is committed before the cart is touched, so a failed insert leaves
the cart as it was and a cart is never emptied without an order behind it.
A failed clear after a successful insert is logged and the checkout still
succeeds.

The client's items snapshot and total are stored as given. The cart is then
cleared wholesale, including anything added after the client read it; that
race is known and accepted.
"""
import json
from typing import Any, Optional

import structlog
from pydantic import BaseModel

from shop_service.db.cart import CartStore
from shop_service.db.orders import ContactInfo, OrderLedger
from shop_service.errors import InvalidInput, StorageError
from shop_service.notifications import NotificationDispatcher, OrderNotice

logger = structlog.get_logger(__name__)


class CheckoutRequest(ContactInfo):
    items: Any = None
    total: Optional[int] = None


class CheckoutResult(BaseModel):
    order_id: int
    cart_cleared: bool = True


def normalize_items(items: Any) -> str:
    if isinstance(items, str):
        return items
    return json.dumps(items, ensure_ascii=False)


def count_items(items_blob: str) -> int:
    """Sum of quantities in the snapshot; a row without a quantity counts once."""
    try:
        items = json.loads(items_blob)
    except ValueError:
        return 0
    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list):
        return 0

    count = 0
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            count += int(item.get("quantity", 1))
        except (TypeError, ValueError):
            count += 1
    return count


class CheckoutOrchestrator:
    def __init__(self, cart: CartStore, ledger: OrderLedger, dispatcher: NotificationDispatcher):
        self.cart = cart
        self.ledger = ledger
        self.dispatcher = dispatcher

    async def checkout(self, user_id: str, request: CheckoutRequest) -> CheckoutResult:
        if request.items is None or request.total is None:
            raise InvalidInput("items and total required")
        items_blob = normalize_items(request.items)
        contact = ContactInfo(
            user_name=request.user_name,
            user_phone=request.user_phone,
            user_address=request.user_address,
        )

        # StorageError propagates from here; the cart has not been touched yet
        order_id = await self.ledger.create_order(user_id, contact, items_blob, request.total)
        log = logger.bind(order_id=order_id, user_id=user_id)
        log.info("order_created", total=request.total)

        cart_cleared = True
        try:
            removed = await self.cart.clear_all(user_id)
            log.debug("cart_cleared", removed=removed)
        except StorageError:
            cart_cleared = False
            log.warning("cart_clear_failed")

        notice = OrderNotice(
            order_id=order_id,
            user_id=user_id,
            display_name=contact.user_name,
            phone=contact.user_phone,
            total=request.total,
            item_count=count_items(items_blob),
        )
        self.dispatcher.dispatch(notice)

        return CheckoutResult(order_id=order_id, cart_cleared=cart_cleared)
