# shop_service/routes/admin.py
from fastapi import APIRouter, Depends

from shop_service.auth import require_admin
from shop_service.db.schemas import OkResponse

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/verify", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def verify_admin():
    return {"ok": True}
