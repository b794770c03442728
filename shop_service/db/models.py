# shop_service/db/models.py
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shop_service.db.database import Base

DEFAULT_STORE_ID = 1

CATEGORIES = ("tee", "hoodie", "pants", "jacket", "accessories")


class OrderStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"


class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    # No database-level constraint: a store can go while its products stay behind
    products = relationship(
        "Product",
        primaryjoin="Store.id == foreign(Product.store_id)",
        back_populates="store",
        passive_deletes=True,
    )


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(
        Integer,
        index=True,
        nullable=False,
        default=DEFAULT_STORE_ID,
        server_default=text(str(DEFAULT_STORE_ID)),
    )
    name = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    price = Column(Integer, nullable=False)  # whole currency units
    image_url = Column(String, nullable=True)
    category = Column(String, nullable=False, default="tee")
    sizes = Column(String, nullable=False, default="One size")  # "S,M,L", first is the default pick
    created_at = Column(DateTime, server_default=func.now())

    store = relationship("Store", primaryjoin="Store.id == foreign(Product.store_id)", back_populates="products")


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    product_id = Column(Integer, index=True, nullable=False)  # not checked against products
    size = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, server_default=func.now())


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    user_name = Column(String, nullable=True)
    user_phone = Column(String, nullable=True)
    user_address = Column(String, nullable=True)
    items = Column(Text, nullable=False)  # snapshot of the cart, stored verbatim
    total = Column(Integer, nullable=False)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.pending)
    created_at = Column(DateTime, server_default=func.now())


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False)
    user_name = Column(String, nullable=True)
    rating = Column(Integer, nullable=False, default=5)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    comments = relationship("ReviewComment", back_populates="review", order_by="ReviewComment.id")


class ReviewComment(Base):
    __tablename__ = "review_comments"

    id = Column(Integer, primary_key=True, index=True)
    review_id = Column(Integer, ForeignKey("reviews.id"), nullable=False)
    user_id = Column(String, nullable=False)
    user_name = Column(String, nullable=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    review = relationship("Review", back_populates="comments")
