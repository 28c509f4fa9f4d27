from components.account.repository import AccountRepository
from components.dashboard.repository import DashboardRepository
from components.installment.repository import InstallmentRepository
from scripts.seed_data import seed


async def test_seed_creates_demo_data(session, clock, adapter):
    counts = await seed(session, clock=clock, adapter=adapter)
    assert counts["installments"] == 2

    plans = await InstallmentRepository(session, adapter=adapter, clock=clock).list()
    assert sorted(plan.paid_count for plan in plans) == [0, 3]
    assert len(await AccountRepository(session).get_all()) == 2

    dashboard = DashboardRepository(session, adapter=adapter, clock=clock)
    summary = await dashboard.get_summary()
    assert summary.total_debts == 3000000
    assert summary.pending_checks == 1
    assert summary.current_month == "1404/08"
    # phone plan (due day 31) and mortgage (started today) both fall due this month
    assert summary.monthly_installments_total == 2500000 + 8000000

    trends = await dashboard.get_trends(3)
    assert trends.series["expenses"] == [5100000, 3900000, 4200000]
    assert trends.month_names[-1] == "آبان 1404"
