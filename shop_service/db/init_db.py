# shop_service/db/init_db.py
import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from shop_service.db.database import Base
from shop_service.db.models import DEFAULT_STORE_ID, Product, Store

logger = structlog.get_logger(__name__)

DEMO_STORE = {
    "name": "ZEN",
    "description": "Minimal streetwear",
}

DEMO_PRODUCTS = [
    ("Essential Tee", "Premium cotton basic tee", 2990,
     "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=400", "tee", "S,M,L,XL"),
    ("Oversized Hoodie", "Oversized hoodie in soft fleece", 5990,
     "https://images.unsplash.com/photo-1556821840-3a63f95609a7?w=400", "hoodie", "S,M,L,XL"),
    ("Cargo Pants", "Wide cargo pants with plenty of pockets", 4990,
     "https://images.unsplash.com/photo-1624378439575-d8705ad7ae80?w=400", "pants", "S,M,L,XL"),
    ("Minimal Jacket", "Minimalist windbreaker", 7990,
     "https://images.unsplash.com/photo-1591047139829-d91aecb6caea?w=400", "jacket", "S,M,L,XL"),
    ("Black Cap", "Black cap with ZEN embroidery", 1990,
     "https://images.unsplash.com/photo-1588850561407-ed78c282e89b?w=400", "accessories", "One size"),
]


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def seed_demo_data(db: AsyncSession):
    """Insert the default store and demo products, but only into empty tables."""
    if await _count(db, Store) == 0:
        store = Store(**DEMO_STORE)
        db.add(store)
        await db.commit()
        await db.refresh(store)
        logger.info("seeded_default_store", store_id=store.id)

    if await _count(db, Product) == 0:
        result = await db.execute(select(func.min(Store.id)))
        store_id = result.scalar_one_or_none() or DEFAULT_STORE_ID
        for name, description, price, image_url, category, sizes in DEMO_PRODUCTS:
            db.add(Product(
                store_id=store_id,
                name=name,
                description=description,
                price=price,
                image_url=image_url,
                category=category,
                sizes=sizes,
            ))
        await db.commit()
        logger.info("seeded_demo_products", count=len(DEMO_PRODUCTS))


async def init_db(engine: AsyncEngine, seed: bool = True):
    # create_all skips tables that already exist
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if seed:
        async with AsyncSession(engine, expire_on_commit=False) as db:
            await seed_demo_data(db)
