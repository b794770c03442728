# shop_service/routes/cart.py
from typing import List

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.db.cart import CartStore
from shop_service.db.database import get_db
from shop_service.db.schemas import CartItemCreate, CartItemResponse, OkResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_cart_store(db: AsyncSession = Depends(get_db)) -> CartStore:
    return CartStore(db)


@router.get("/{user_id}", response_model=List[CartItemResponse])
async def get_cart(user_id: str, cart: CartStore = Depends(get_cart_store)):
    return await cart.list_items(user_id)


@router.post("/{user_id}", response_model=OkResponse, status_code=201)
async def add_to_cart(user_id: str, body: CartItemCreate, cart: CartStore = Depends(get_cart_store)):
    item = await cart.add_item(user_id, body.product_id, body.size, body.quantity)
    logger.debug("cart_item_added", user_id=user_id, item_id=item.id, product_id=item.product_id)
    return {"ok": True}


@router.delete("/{user_id}/{item_id}", response_model=OkResponse)
async def remove_from_cart(user_id: str, item_id: int, cart: CartStore = Depends(get_cart_store)):
    await cart.remove_item(user_id, item_id)
    return {"ok": True}
