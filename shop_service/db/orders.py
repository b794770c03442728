# shop_service/db/orders.py
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.db.database import storage_guard
from shop_service.db.models import Order, OrderStatus
from shop_service.errors import InvalidInput, NotFound


class ContactInfo(BaseModel):
    user_name: Optional[str] = None
    user_phone: Optional[str] = None
    user_address: Optional[str] = None


class OrderLedger:
    """Append-only order records.

    An order keeps the items blob exactly as it was submitted. It is never
    re-read against live products, so catalog edits and deletions leave past
    orders alone. Orders are never deleted; only their status moves.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_orders(self, user_id: str) -> List[Order]:
        async with storage_guard(self.db, "list_orders", user_id=user_id):
            result = await self.db.execute(
                select(Order)
                .where(Order.user_id == user_id)
                .order_by(Order.created_at.desc(), Order.id.desc())
            )
            return list(result.scalars().all())

    async def list_all(self) -> List[Order]:
        async with storage_guard(self.db, "list_all_orders"):
            result = await self.db.execute(select(Order).order_by(Order.created_at.desc(), Order.id.desc()))
            return list(result.scalars().all())

    async def get_order(self, order_id: int) -> Order:
        async with storage_guard(self.db, "get_order", order_id=order_id):
            order = await self.db.get(Order, order_id)
        if order is None:
            raise NotFound("Order not found")
        return order

    async def create_order(self, user_id: str, contact: ContactInfo, items: str, total: int) -> int:
        # total is whatever the client computed; it is not checked against items
        if not items:
            raise InvalidInput("items and total required")
        if total is None:
            raise InvalidInput("items and total required")

        order = Order(
            user_id=user_id,
            user_name=contact.user_name or None,
            user_phone=contact.user_phone or None,
            user_address=contact.user_address or None,
            items=items,
            total=total,
            status=OrderStatus.pending,
        )
        async with storage_guard(self.db, "create_order", user_id=user_id):
            self.db.add(order)
            await self.db.commit()
            await self.db.refresh(order)
        return order.id

    async def set_status(self, order_id: int, status) -> Order:
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise InvalidInput("status must be one of: " + ", ".join(s.value for s in OrderStatus))

        order = await self.get_order(order_id)
        async with storage_guard(self.db, "set_order_status", order_id=order_id):
            order.status = new_status
            await self.db.commit()
            await self.db.refresh(order)
        return order
