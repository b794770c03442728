# shop_service/routes/catalog.py
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.auth import require_admin
from shop_service.db import functions
from shop_service.db.database import get_db
from shop_service.db.schemas import (
    CreatedResponse,
    OkResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StoreCreate,
    StoreResponse,
    StoreUpdate,
)

logger = structlog.get_logger(__name__)

products_router = APIRouter(prefix="/api/products", tags=["products"])
stores_router = APIRouter(prefix="/api/stores", tags=["stores"])


@products_router.get("", response_model=List[ProductResponse])
async def read_products(
    category: Optional[str] = None,
    searchquery: str = Query(default="", alias="search"),
    db: AsyncSession = Depends(get_db),
):
    return await functions.get_all_products(db, category, searchquery)


@products_router.get("/{product_id}", response_model=ProductResponse)
async def read_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await functions.get_product_by_id(db, product_id)


@products_router.post("", response_model=CreatedResponse, status_code=201, dependencies=[Depends(require_admin)])
async def create_new_product(product: ProductCreate, db: AsyncSession = Depends(get_db)):
    new_product = await functions.create_product(db, product)
    logger.info("product_created", product_id=new_product.id, store_id=new_product.store_id)
    return {"id": new_product.id, "ok": True}


@products_router.patch("/{product_id}", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def update_existing_product(product_id: int, product: ProductUpdate, db: AsyncSession = Depends(get_db)):
    await functions.update_product(db, product_id, product)
    return {"ok": True}


@products_router.delete("/{product_id}", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def delete_existing_product(product_id: int, db: AsyncSession = Depends(get_db)):
    await functions.delete_product(db, product_id)
    logger.info("product_deleted", product_id=product_id)
    return {"ok": True}


@stores_router.get("", response_model=List[StoreResponse])
async def read_stores(db: AsyncSession = Depends(get_db)):
    return await functions.get_all_stores(db)


@stores_router.get("/{store_id}/products", response_model=List[ProductResponse])
async def read_store_products(store_id: int, db: AsyncSession = Depends(get_db)):
    return await functions.get_products_by_store(db, store_id)


@stores_router.post("", response_model=CreatedResponse, status_code=201, dependencies=[Depends(require_admin)])
async def create_new_store(store: StoreCreate, db: AsyncSession = Depends(get_db)):
    new_store = await functions.create_store(db, store)
    logger.info("store_created", store_id=new_store.id)
    return {"id": new_store.id, "ok": True}


@stores_router.patch("/{store_id}", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def update_existing_store(store_id: int, store: StoreUpdate, db: AsyncSession = Depends(get_db)):
    await functions.update_store(db, store_id, store)
    return {"ok": True}


@stores_router.delete("/{store_id}", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def delete_existing_store(store_id: int, db: AsyncSession = Depends(get_db)):
    fallback_id = await functions.delete_store(db, store_id)
    logger.info("store_deleted", store_id=store_id, products_moved_to=fallback_id)
    return {"ok": True}
