# shop_service/db/schemas.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel

from shop_service.db.models import OrderStatus


class OkResponse(BaseModel):
    ok: bool = True


class CreatedResponse(OkResponse):
    id: int


# Stores
class StoreBase(BaseModel):
    name: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None


class StoreCreate(StoreBase):
    pass


class StoreUpdate(StoreBase):
    pass


class StoreResponse(BaseModel):
    id: int
    name: str
    image_url: Optional[str] = None
    description: Optional[str] = None

    class Config:
        from_attributes = True


# Products
class ProductBase(BaseModel):
    store_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    sizes: Optional[str] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    pass


class ProductResponse(BaseModel):
    id: int
    store_id: int
    name: str
    description: Optional[str] = None
    price: int
    image_url: Optional[str] = None
    category: str
    sizes: str

    class Config:
        from_attributes = True


# Cart
class CartItemCreate(BaseModel):
    product_id: Optional[int] = None
    size: Optional[str] = None
    quantity: int = 1


class CartItemResponse(BaseModel):
    """A cart row joined with the product as it is right now."""

    id: int
    user_id: str
    product_id: int
    size: str
    quantity: int
    name: str
    description: Optional[str] = None
    price: int
    image_url: Optional[str] = None
    category: str
    sizes: str


# Orders
class OrderCreate(BaseModel):
    user_name: Optional[str] = None
    user_phone: Optional[str] = None
    user_address: Optional[str] = None
    # either a JSON string or the cart items themselves
    items: Any = None
    total: Optional[int] = None


class OrderCreatedResponse(OkResponse):
    orderId: int


class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None


class OrderResponse(BaseModel):
    id: int
    user_id: str
    user_name: Optional[str] = None
    user_phone: Optional[str] = None
    user_address: Optional[str] = None
    items: str
    total: int
    status: OrderStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Reviews
class ReviewCreate(BaseModel):
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    rating: Optional[int] = None
    text: Optional[str] = None


class ReviewCommentCreate(BaseModel):
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    text: Optional[str] = None


class ReviewCommentResponse(BaseModel):
    id: int
    review_id: int
    user_id: str
    user_name: Optional[str] = None
    text: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReviewResponse(BaseModel):
    id: int
    user_id: str
    user_name: Optional[str] = None
    rating: int
    text: str
    created_at: Optional[datetime] = None
    comments: List[ReviewCommentResponse] = []

    class Config:
        from_attributes = True
