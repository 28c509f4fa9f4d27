"""Backup export and restore endpoints."""

from typing import Any, Dict
from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from components.backup.service import BackupService
from components.core.init_db import get_db

router = APIRouter(
    prefix="/backup",
    tags=["backup"],
    responses={422: {"description": "Invalid backup document"}},
)


@router.get("/export")
async def export_backup(db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """Dump every table as JSON with a meta header."""
    return await BackupService(db).export_all()


@router.post("/import")
async def import_backup(
    document: Any = Body(...),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """
    Replace all data with the contents of a backup document.

    Tables missing from the document are emptied. Returns the number of
    rows restored per table.
    """
    counts = await BackupService(db).import_all(document)
    return {"restored": counts}
