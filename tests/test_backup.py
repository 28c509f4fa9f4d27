import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from components.account.repository import AccountRepository
from components.account.schemas import AccountCreate
from components.backup.service import BACKUP_VERSION, BackupService
from components.core.exceptions import BackupFormatError
from components.installment.schemas import InstallmentCreate
from components.ledger import models, schemas
from components.ledger.repository import LedgerRepository


@pytest.fixture
def backup(session, clock):
    return BackupService(session, clock=clock)


async def populate(session, installments, clock):
    plan = await installments.create(InstallmentCreate(
        title="Car",
        installment_amount=Decimal("1000"),
        installment_count=3,
        start_date=datetime(2025, 9, 21, 20, 30, tzinfo=timezone.utc),
    ))
    await installments.toggle_payment(plan.id, 1, True)
    await AccountRepository(session, clock=clock).create(AccountCreate(title="Main", card_last4="1234"))
    await LedgerRepository(session, models.Debt, clock=clock).create(schemas.DebtCreate(
        person_name="Ali", amount=Decimal("300"), due_date=clock.now(),
    ))
    return plan


async def test_export_is_json_ready(session, installments, clock, backup):
    await populate(session, installments, clock)
    document = await backup.export_all()

    assert document["meta"]["version"] == BACKUP_VERSION
    assert len(document["installments"]) == 1
    assert len(document["installment_payments"]) == 3
    assert document["debts"][0]["amount"] == 300.0
    assert document["credits"] == []
    json.dumps(document)


async def test_import_replaces_everything(session, installments, clock, backup):
    plan = await populate(session, installments, clock)
    document = json.loads(json.dumps(await backup.export_all()))

    await installments.delete(plan.id)
    await AccountRepository(session, clock=clock).create(AccountCreate(title="Extra"))

    counts = await backup.import_all(document)
    assert counts["installment_payments"] == 3
    assert counts["accounts"] == 1

    payments = await installments.get_payments(plan.id)
    assert [p.is_paid for p in payments] == [True, False, False]
    assert [a.title for a in await AccountRepository(session).get_all()] == ["Main"]


async def test_missing_tables_restore_empty(session, installments, clock, backup):
    await populate(session, installments, clock)
    counts = await backup.import_all({"meta": {"version": 1}})
    assert set(counts.values()) == {0}
    assert await installments.list() == []


@pytest.mark.parametrize("document", [
    [],
    {"meta": {"version": BACKUP_VERSION + 1}},
    {"meta": {"version": "1"}},
    {"debts": {"id": 1}},
    {"debts": ["row"]},
    {"debts": [{"id": 1, "due_date": "yesterday"}]},
])
async def test_rejects_bad_documents(backup, document):
    with pytest.raises(BackupFormatError):
        await backup.import_all(document)
