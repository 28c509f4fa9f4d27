"""Account and SMS balance endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.account import schemas
from components.account.repository import AccountRepository
from components.core.database import atomic
from components.core.init_db import get_db
from components.sms.parser import parse_balances

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    responses={404: {"description": "Not found"}},
)

sms_router = APIRouter(
    prefix="/sms",
    tags=["sms"],
)


@router.get("/", response_model=List[schemas.Account])
async def read_accounts(db: AsyncSession = Depends(get_db)):
    """Get all accounts ordered by title."""
    return await AccountRepository(db).get_all()


@router.post("/", response_model=schemas.Account, status_code=status.HTTP_201_CREATED)
async def create_account(account: schemas.AccountCreate, db: AsyncSession = Depends(get_db)):
    """Create a new account."""
    repo = AccountRepository(db)

    # Card suffixes are unique across accounts
    if account.card_last4 and await repo.get_by_last4(account.card_last4):
        raise HTTPException(
            status_code=400,
            detail="An account with this card number already exists"
        )

    return await repo.create(account)


@router.get("/by-card/{last4}", response_model=schemas.Account)
async def read_account_by_card(last4: str, db: AsyncSession = Depends(get_db)):
    """Get a specific account by the last four digits of its card."""
    account = await AccountRepository(db).get_by_last4(last4)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return account


@router.put("/by-card/{last4}/balance", response_model=schemas.Account)
async def upsert_account_balance(
    update: schemas.BalanceUpdate,
    last4: str = Path(..., pattern=schemas.CARD_LAST4),
    db: AsyncSession = Depends(get_db)
):
    """Set the balance of the account with this card suffix, creating it if needed."""
    repo = AccountRepository(db)
    async with atomic(db):
        account = await repo.upsert_balance(last4, update.balance)
    return account


@router.get("/{account_id}", response_model=schemas.Account)
async def read_account(account_id: int, db: AsyncSession = Depends(get_db)):
    """Get a specific account by ID."""
    account = await AccountRepository(db).get_by_id(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return account


@router.patch("/{account_id}", response_model=schemas.Account)
async def update_account(
    account_id: int,
    account: schemas.AccountUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update an account."""
    repo = AccountRepository(db)

    # Check if the new card number is already taken by another account
    if account.card_last4:
        existing = await repo.get_by_last4(account.card_last4)
        if existing and existing.id != account_id:
            raise HTTPException(
                status_code=400,
                detail="Card number is already used by another account"
            )

    return await repo.update(account_id, account)


@router.delete("/{account_id}")
async def delete_account(account_id: int, db: AsyncSession = Depends(get_db)):
    """Delete an account."""
    if not await AccountRepository(db).delete(account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"message": "Account deleted successfully"}


@sms_router.post("/parse", response_model=schemas.SmsParseResult)
async def parse_sms(sms: schemas.SmsText):
    """
    Extract card balances from pasted bank SMS text.

    Returns one entry per card suffix with the last balance seen for it.
    Text without recognizable balances gives an empty list.
    """
    balances = parse_balances(sms.text)
    return schemas.SmsParseResult(
        balances=[schemas.ParsedBalance(card_last4=last4, balance=balance) for last4, balance in balances.items()]
    )


@sms_router.post("/apply", response_model=schemas.SmsApplyResult)
async def apply_sms(sms: schemas.SmsText, db: AsyncSession = Depends(get_db)):
    """Parse pasted SMS text and write every balance found to the matching account."""
    balances = parse_balances(sms.text)
    accounts = await AccountRepository(db).apply_balances(balances)
    return schemas.SmsApplyResult(
        balances=[schemas.ParsedBalance(card_last4=last4, balance=balance) for last4, balance in balances.items()],
        accounts=[schemas.Account.model_validate(account) for account in accounts],
    )
