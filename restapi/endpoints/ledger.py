"""Debt, credit, check and expense endpoints for the API."""

from typing import List, Type
from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import RecordNotFoundError
from components.core.init_db import get_db
from components.ledger import models, schemas
from components.ledger.repository import LedgerRepository


def build_router(
    prefix: str,
    model: Type[models.Base],
    read_schema: Type[BaseModel],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
) -> APIRouter:
    """CRUD router for one ledger table."""
    tag = prefix.strip("/")
    router = APIRouter(
        prefix=prefix,
        tags=[tag],
        responses={404: {"description": "Not found"}},
    )

    @router.get("/", response_model=List[read_schema])
    async def read_records(db: AsyncSession = Depends(get_db)):
        return await LedgerRepository(db, model).get_all()

    @router.post("/", response_model=read_schema, status_code=status.HTTP_201_CREATED)
    async def create_record(data: create_schema, db: AsyncSession = Depends(get_db)):
        return await LedgerRepository(db, model).create(data)

    @router.get("/{record_id}", response_model=read_schema)
    async def read_record(record_id: int, db: AsyncSession = Depends(get_db)):
        repo = LedgerRepository(db, model)
        record = await repo.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(repo.kind, record_id)
        return record

    @router.patch("/{record_id}", response_model=read_schema)
    async def update_record(record_id: int, data: update_schema, db: AsyncSession = Depends(get_db)):
        return await LedgerRepository(db, model).update(record_id, data)

    @router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_record(record_id: int, db: AsyncSession = Depends(get_db)):
        await LedgerRepository(db, model).delete(record_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


debts = build_router("/debts", models.Debt, schemas.Debt, schemas.DebtCreate, schemas.DebtUpdate)
credits = build_router("/credits", models.Credit, schemas.Credit, schemas.CreditCreate, schemas.CreditUpdate)
checks = build_router("/checks", models.Check, schemas.Check, schemas.CheckCreate, schemas.CheckUpdate)
expenses = build_router("/expenses", models.Expense, schemas.Expense, schemas.ExpenseCreate, schemas.ExpenseUpdate)
