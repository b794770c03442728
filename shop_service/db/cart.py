# shop_service/db/cart.py
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.db.database import storage_guard
from shop_service.db.models import CartItem, Product
from shop_service.errors import InvalidInput, NotFound


class CartStore:
    """Per-user cart rows. Every add is its own row; nothing is merged."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_items(self, user_id: str) -> List[dict]:
        """Cart rows joined with the product as it is now, not as it was when added."""
        async with storage_guard(self.db, "list_cart", user_id=user_id):
            result = await self.db.execute(
                select(CartItem, Product)
                .join(Product, CartItem.product_id == Product.id)
                .where(CartItem.user_id == user_id)
                .order_by(CartItem.id)
            )
            rows = result.all()

        return [
            {
                "id": item.id,
                "user_id": item.user_id,
                "product_id": item.product_id,
                "size": item.size,
                "quantity": item.quantity,
                "name": product.name,
                "description": product.description,
                "price": product.price,
                "image_url": product.image_url,
                "category": product.category,
                "sizes": product.sizes,
            }
            for item, product in rows
        ]

    async def add_item(self, user_id: str, product_id: int, size: str, quantity: int = 1) -> CartItem:
        # The product and size are taken on trust; only presence is checked
        if not product_id or not size:
            raise InvalidInput("product_id and size required")
        if quantity is None or quantity < 1:
            raise InvalidInput("quantity must be at least 1")

        item = CartItem(user_id=user_id, product_id=product_id, size=size, quantity=quantity)
        async with storage_guard(self.db, "add_cart_item", user_id=user_id, product_id=product_id):
            self.db.add(item)
            await self.db.commit()
            await self.db.refresh(item)
        return item

    async def remove_item(self, user_id: str, item_id: int):
        async with storage_guard(self.db, "remove_cart_item", user_id=user_id, item_id=item_id):
            result = await self.db.execute(
                delete(CartItem).where(CartItem.id == item_id, CartItem.user_id == user_id)
            )
            await self.db.commit()
        if result.rowcount == 0:
            raise NotFound("Item not found")

    async def clear_all(self, user_id: str) -> int:
        """Drop every row of the user's cart. Clearing an empty cart is fine."""
        async with storage_guard(self.db, "clear_cart", user_id=user_id):
            result = await self.db.execute(delete(CartItem).where(CartItem.user_id == user_id))
            await self.db.commit()
        return result.rowcount
