from decimal import Decimal

import pytest

from components.account.repository import AccountRepository
from components.account.schemas import AccountCreate, AccountUpdate
from components.core.exceptions import RecordNotFoundError


@pytest.fixture
def accounts(session, clock):
    return AccountRepository(session, clock=clock)


async def test_upsert_creates_masked_account(accounts):
    account = await accounts.upsert_balance("1234", 2500000)
    await accounts.session.commit()

    assert account.title == "کارت ****1234"
    assert account.card_last4 == "1234"
    assert account.balance == 2500000


async def test_upsert_updates_existing_account(accounts):
    existing = await accounts.create(AccountCreate(title="Mellat", card_last4="1234"))
    await accounts.upsert_balance("1234", 700)
    await accounts.session.commit()

    assert [a.id for a in await accounts.get_all()] == [existing.id]
    assert (await accounts.get_by_last4("1234")).balance == Decimal("700")


async def test_apply_balances_in_one_transaction(accounts):
    await accounts.create(AccountCreate(title="Melli", card_last4="2222", balance=Decimal("5")))
    updated = await accounts.apply_balances({"1111": 1200000, "2222": 300000})

    assert [a.card_last4 for a in updated] == ["1111", "2222"]
    balances = {a.card_last4: a.balance for a in await accounts.get_all()}
    assert balances == {"1111": Decimal("1200000"), "2222": Decimal("300000")}


async def test_update_and_delete(accounts):
    account = await accounts.create(AccountCreate(title="Old"))
    updated = await accounts.update(account.id, AccountUpdate(title="  New  ", balance=Decimal("10")))
    assert updated.title == "New"
    assert updated.balance == Decimal("10")

    assert await accounts.delete(account.id)
    assert not await accounts.delete(account.id)
    with pytest.raises(RecordNotFoundError):
        await accounts.update(account.id, AccountUpdate(title="Gone"))
