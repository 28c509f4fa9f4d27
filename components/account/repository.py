"""Repository for account operations."""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account.schemas import AccountCreate, AccountUpdate
from components.core.clock import SystemClock
from components.core.database import atomic
from components.core.exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)

Amount = Union[int, Decimal]


class AccountRepository:
    """Repository for account operations."""

    def __init__(self, session: AsyncSession, clock=None):
        """Initialize repository with database session."""
        self.session = session
        self.clock = clock or SystemClock()

    async def get_all(self) -> List[Account]:
        """Get all accounts ordered by title."""
        result = await self.session.execute(select(Account).order_by(Account.title, Account.id))
        return list(result.scalars().all())

    async def get_by_id(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        result = await self.session.execute(
            select(Account).where(Account.id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_by_last4(self, last4: str) -> Optional[Account]:
        """Get account by the last four digits of its card."""
        result = await self.session.execute(
            select(Account).where(Account.card_last4 == last4).limit(1)
        )
        return result.scalar_one_or_none()

    async def create(self, account: AccountCreate) -> Account:
        """Create a new account."""
        now = self.clock.now()
        db_account = Account(
            title=account.title.strip(),
            bank_name=account.bank_name,
            card_last4=account.card_last4,
            balance=account.balance,
            created_at=now,
            updated_at=now,
        )
        async with atomic(self.session):
            self.session.add(db_account)
        return db_account

    async def update(self, account_id: int, account: AccountUpdate) -> Account:
        """Update account by ID."""
        db_account = await self.get_by_id(account_id)
        if not db_account:
            raise RecordNotFoundError("Account", account_id)

        async with atomic(self.session):
            for field, value in account.model_dump(exclude_unset=True).items():
                if field == "title" and value is not None:
                    value = value.strip()
                setattr(db_account, field, value)
            db_account.updated_at = self.clock.now()
        return db_account

    async def delete(self, account_id: int) -> bool:
        """Delete account by ID."""
        db_account = await self.get_by_id(account_id)
        if not db_account:
            return False

        async with atomic(self.session):
            await self.session.delete(db_account)
        return True

    async def upsert_balance(self, last4: str, balance: Amount) -> Account:
        """
        Set the balance of the account with this card suffix.

        An unknown suffix creates a new account titled after the masked card.
        The caller owns the transaction.
        """
        now = self.clock.now()
        db_account = await self.get_by_last4(last4)
        if db_account is None:
            db_account = Account(
                title=f"کارت ****{last4}",
                bank_name="",
                card_last4=last4,
                balance=balance,
                created_at=now,
                updated_at=now,
            )
            self.session.add(db_account)
        else:
            db_account.balance = balance
            db_account.updated_at = now
        await self.session.flush()
        return db_account

    async def apply_balances(self, balances: Dict[str, int]) -> List[Account]:
        """Upsert every parsed balance in a single transaction."""
        updated = []
        async with atomic(self.session):
            for last4, balance in balances.items():
                updated.append(await self.upsert_balance(last4, balance))
        logger.info("Applied %s SMS balance(s) to accounts", len(updated))
        return updated
