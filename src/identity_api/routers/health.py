from fastapi import APIRouter, Depends

from ..db import Database
from ..deps import get_database

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(database: Database = Depends(get_database)):
    return {"status": "ok", "database": database.state.value}
