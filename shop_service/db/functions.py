# shop_service/db/functions.py
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shop_service.db.database import storage_guard
from shop_service.db.models import DEFAULT_STORE_ID, CartItem, Product, Review, ReviewComment, Store
from shop_service.db.schemas import (
    ProductCreate,
    ProductUpdate,
    ReviewCommentCreate,
    ReviewCreate,
    StoreCreate,
    StoreUpdate,
)
from shop_service.errors import InvalidInput, NotFound

GUEST_NAME = "Guest"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _clean_sizes(sizes: str) -> str:
    return ",".join(s.strip() for s in sizes.split(",") if s.strip())


# Stores

async def get_all_stores(db: AsyncSession) -> List[Store]:
    async with storage_guard(db, "list_stores"):
        result = await db.execute(select(Store).order_by(Store.id))
        return list(result.scalars().all())


async def get_store_by_id(db: AsyncSession, store_id: int) -> Store:
    async with storage_guard(db, "get_store", store_id=store_id):
        store = await db.get(Store, store_id)
    if store is None:
        raise NotFound("Store not found")
    return store


async def get_products_by_store(db: AsyncSession, store_id: int) -> List[Product]:
    async with storage_guard(db, "list_store_products", store_id=store_id):
        result = await db.execute(select(Product).where(Product.store_id == store_id).order_by(Product.id))
        return list(result.scalars().all())


async def create_store(db: AsyncSession, data: StoreCreate) -> Store:
    name = _clean(data.name)
    if not name:
        raise InvalidInput("name required")

    store = Store(name=name, image_url=_clean(data.image_url), description=_clean(data.description))
    async with storage_guard(db, "create_store"):
        db.add(store)
        await db.commit()
        await db.refresh(store)
    return store


async def update_store(db: AsyncSession, store_id: int, data: StoreUpdate) -> Store:
    store = await get_store_by_id(db, store_id)

    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise InvalidInput("No fields to update")
    if "name" in changes:
        if not _clean(changes["name"]):
            raise InvalidInput("name must not be empty")
        store.name = _clean(changes["name"])
    if "image_url" in changes:
        store.image_url = _clean(changes["image_url"])
    if "description" in changes:
        store.description = _clean(changes["description"])

    async with storage_guard(db, "update_store", store_id=store_id):
        await db.commit()
        await db.refresh(store)
    return store


async def delete_store(db: AsyncSession, store_id: int) -> int:
    """Delete a store, handing its products to the lowest remaining store id.

    Products are never deleted with their store. With no store left they fall
    back to DEFAULT_STORE_ID. Returns the id the products were moved to.
    """
    store = await get_store_by_id(db, store_id)

    async with storage_guard(db, "delete_store", store_id=store_id):
        result = await db.execute(select(func.min(Store.id)).where(Store.id != store_id))
        fallback_id = result.scalar_one_or_none() or DEFAULT_STORE_ID
        await db.execute(update(Product).where(Product.store_id == store_id).values(store_id=fallback_id))
        await db.delete(store)
        await db.commit()
    return fallback_id


# Products

async def get_all_products(db: AsyncSession, category: Optional[str] = None, search: str = "") -> List[Product]:
    query = select(Product)
    if category:
        query = query.where(Product.category == category)
    if search:
        query = query.where(Product.name.ilike(f"%{search}%"))

    async with storage_guard(db, "list_products"):
        result = await db.execute(query.order_by(Product.id))
        return list(result.scalars().all())


async def get_product_by_id(db: AsyncSession, product_id: int) -> Product:
    async with storage_guard(db, "get_product", product_id=product_id):
        product = await db.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


async def create_product(db: AsyncSession, data: ProductCreate) -> Product:
    name = _clean(data.name)
    if not name:
        raise InvalidInput("name required")
    if data.price is None:
        raise InvalidInput("price required")
    if data.price < 0:
        raise InvalidInput("price must be non-negative")

    product = Product(
        store_id=data.store_id or DEFAULT_STORE_ID,
        name=name,
        description=_clean(data.description),
        price=data.price,
        image_url=_clean(data.image_url),
        category=_clean(data.category) or "tee",
        sizes=_clean_sizes(data.sizes or "") or "One size",
    )
    async with storage_guard(db, "create_product"):
        db.add(product)
        await db.commit()
        await db.refresh(product)
    return product


async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate) -> Product:
    product = await get_product_by_id(db, product_id)

    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise InvalidInput("No fields to update")
    if "name" in changes and not _clean(changes["name"]):
        raise InvalidInput("name must not be empty")
    if "price" in changes and changes["price"] < 0:
        raise InvalidInput("price must be non-negative")

    for field, value in changes.items():
        if field == "sizes":
            value = _clean_sizes(value) or product.sizes
        elif field == "category":
            value = _clean(value) or product.category
        elif isinstance(value, str):
            value = _clean(value)
        setattr(product, field, value)

    async with storage_guard(db, "update_product", product_id=product_id):
        await db.commit()
        await db.refresh(product)
    return product


async def delete_product(db: AsyncSession, product_id: int):
    # Orders keep their own copy of the items; only live cart rows point at the product
    product = await get_product_by_id(db, product_id)
    async with storage_guard(db, "delete_product", product_id=product_id):
        await db.execute(delete(CartItem).where(CartItem.product_id == product_id))
        await db.delete(product)
        await db.commit()


# Reviews

async def get_reviews_with_comments(db: AsyncSession) -> List[Review]:
    async with storage_guard(db, "list_reviews"):
        result = await db.execute(
            select(Review)
            .options(selectinload(Review.comments))
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(result.scalars().all())


async def create_review(db: AsyncSession, data: ReviewCreate) -> Review:
    if not data.user_id or not data.text:
        raise InvalidInput("user_id and text required")

    rating = min(5, max(1, data.rating or 5))
    review = Review(
        user_id=data.user_id,
        user_name=_clean(data.user_name) or GUEST_NAME,
        rating=rating,
        text=data.text,
    )
    async with storage_guard(db, "create_review", user_id=data.user_id):
        db.add(review)
        await db.commit()
        await db.refresh(review)
    return review


async def create_review_comment(db: AsyncSession, review_id: int, data: ReviewCommentCreate) -> ReviewComment:
    if not data.user_id or not data.text:
        raise InvalidInput("user_id and text required")

    async with storage_guard(db, "get_review", review_id=review_id):
        review = await db.get(Review, review_id)
    if review is None:
        raise NotFound("Review not found")

    comment = ReviewComment(
        review_id=review_id,
        user_id=data.user_id,
        user_name=_clean(data.user_name) or GUEST_NAME,
        text=data.text,
    )
    async with storage_guard(db, "create_review_comment", review_id=review_id):
        db.add(comment)
        await db.commit()
        await db.refresh(comment)
    return comment
