# shop_service/routes/reviews.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.db import functions
from shop_service.db.database import get_db
from shop_service.db.schemas import CreatedResponse, ReviewCommentCreate, ReviewCreate, ReviewResponse

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("", response_model=List[ReviewResponse])
async def read_reviews(db: AsyncSession = Depends(get_db)):
    """Newest reviews first, each with its comments in the order they were written."""
    return await functions.get_reviews_with_comments(db)


@router.post("", response_model=CreatedResponse, status_code=201)
async def add_review(review: ReviewCreate, db: AsyncSession = Depends(get_db)):
    new_review = await functions.create_review(db, review)
    return {"id": new_review.id, "ok": True}


@router.post("/{review_id}/comments", response_model=CreatedResponse, status_code=201)
async def add_review_comment(review_id: int, comment: ReviewCommentCreate, db: AsyncSession = Depends(get_db)):
    new_comment = await functions.create_review_comment(db, review_id, comment)
    return {"id": new_comment.id, "ok": True}
