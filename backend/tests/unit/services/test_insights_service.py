"""
Unit Tests for insights
"""
from datetime import datetime, timedelta

import pytest

from kharcha.models.outflow_type import LOAN, MONEY_LENT, SUBSCRIPTION
from kharcha.services import insights_service

NOW = datetime(2024, 6, 14, 12, 0)


def days_ago(n: int) -> str:
    return (NOW - timedelta(days=n)).date().isoformat()


class TestMonthlySpend:

    async def test_last_twelve_months(self, db_session, test_user, add_transaction):
        await add_transaction("Food", 100, datetime(2024, 6, 1))
        await add_transaction("Food", 200, datetime(2024, 5, 10))
        await add_transaction("Food", 50, datetime(2023, 6, 30))
        await add_transaction("Food", 70, datetime(2024, 7, 1))

        months = await insights_service.monthly_spend(db_session, test_user.id, now=NOW)

        assert len(months) == 12
        assert months[0].month == "2023-07"
        assert months[-1].month == "2024-06"
        assert months[-1].total == 100
        assert months[-2].total == 200
        assert sum(m.total for m in months) == 300


class TestBreakdown:

    async def test_totals_per_type_largest_first(self, db_session, test_user, add_transaction):
        await add_transaction("Food", 100, datetime(2024, 6, 2))
        await add_transaction("Food", 150, datetime(2024, 6, 3))
        await add_transaction("Transport", 80, datetime(2024, 6, 4))
        await add_transaction("Transport", 500, datetime(2024, 5, 4))

        breakdown = await insights_service.outflow_type_breakdown(
            db_session, test_user.id, start=datetime(2024, 6, 1), end=datetime(2024, 7, 1)
        )

        assert [(b.name, b.total) for b in breakdown] == [("Food", 250), ("Transport", 80)]


class TestRecurring:

    async def test_subscriptions(self, db_session, test_user, add_transaction):
        await add_transaction(
            SUBSCRIPTION, 499, datetime(2024, 6, 1), provider="Netflix", renewal_date="2024-07-01", remind=True
        )

        [item] = await insights_service.subscriptions(db_session, test_user.id)

        assert item.provider == "Netflix"
        assert item.renewal_date.isoformat() == "2024-07-01"
        assert item.remind is True
        assert item.frequency == "monthly"

    async def test_loans_months_to_payoff(self, db_session, test_user, add_transaction):
        await add_transaction(LOAN, 100000, datetime(2024, 1, 1), loan_name="Car", emi_amount=8500, interest_rate=9.5)
        await add_transaction(LOAN, 5000, datetime(2024, 2, 1), loan_name="Phone")

        loans = {item.loan_name: item for item in await insights_service.loans(db_session, test_user.id)}

        assert loans["Car"].months_to_payoff == 12
        assert loans["Car"].interest_rate == 9.5
        assert loans["Phone"].months_to_payoff is None

    async def test_projected_recurring(self, db_session, test_user, add_transaction):
        await add_transaction(SUBSCRIPTION, 499, datetime(2024, 6, 1), provider="Netflix")
        await add_transaction(SUBSCRIPTION, 1200, datetime(2024, 6, 1), provider="Prime", frequency="yearly")
        await add_transaction(SUBSCRIPTION, 100, datetime(2024, 6, 1), provider="Gym", frequency="weekly")
        await add_transaction(LOAN, 100000, datetime(2024, 1, 1), loan_name="Car", emi_amount=8500)

        projections = await insights_service.projected_recurring(db_session, test_user.id, months=3, now=NOW)

        assert [p.month for p in projections] == ["2024-07", "2024-08", "2024-09"]
        assert projections[0].subscriptions == pytest.approx(1032.33)
        assert projections[0].loans == 8500
        assert projections[0].total == pytest.approx(9532.33)


class TestMoneyLentAgeing:

    async def test_buckets(self, db_session, test_user, add_transaction):
        await add_transaction(MONEY_LENT, 100, datetime(2024, 4, 1), borrower_name="A", due_date=days_ago(10))
        await add_transaction(MONEY_LENT, 200, datetime(2024, 4, 2), borrower_name="B", due_date=days_ago(30))
        await add_transaction(MONEY_LENT, 300, datetime(2024, 4, 1), borrower_name="C", due_date=days_ago(45))
        await add_transaction(MONEY_LENT, 400, datetime(2024, 1, 1), borrower_name="D", due_date=days_ago(90))
        await add_transaction(MONEY_LENT, 500, datetime(2024, 6, 1), borrower_name="E", due_date=days_ago(-5))
        await add_transaction(MONEY_LENT, 600, datetime(2024, 6, 1), borrower_name="F")

        ageing = await insights_service.money_lent_ageing(db_session, test_user.id, now=NOW)

        assert [i.borrower_name for i in ageing.overdue_0_30] == ["A", "B"]
        assert [i.borrower_name for i in ageing.overdue_31_60] == ["C"]
        assert [i.borrower_name for i in ageing.overdue_60_plus] == ["D"]
        assert ageing.overdue_31_60[0].days_overdue == 45


class TestUpcomingAndStreak:

    async def test_upcoming_within_a_week(self, db_session, test_user, add_transaction):
        await add_transaction(SUBSCRIPTION, 499, datetime(2024, 6, 1), provider="Netflix", renewal_date=days_ago(-3))
        await add_transaction(MONEY_LENT, 2000, datetime(2024, 6, 1), borrower_name="Ravi", due_date=days_ago(-1))
        await add_transaction(MONEY_LENT, 900, datetime(2024, 6, 1), borrower_name="Later", due_date=days_ago(-10))
        await add_transaction(SUBSCRIPTION, 99, datetime(2024, 6, 1), provider="Old", renewal_date=days_ago(1))

        events = await insights_service.upcoming_events(db_session, test_user.id, now=NOW)

        assert [(e.type, e.description) for e in events] == [("due", "Ravi"), ("renewal", "Netflix")]

    async def test_streak_counts_back_from_today(self, db_session, test_user, add_transaction):
        for n in (0, 1, 2, 4):
            await add_transaction("Food", 10, NOW - timedelta(days=n))

        assert await insights_service.tracking_streak(db_session, test_user.id, now=NOW) == 3

    async def test_streak_is_zero_without_entry_today(self, db_session, test_user, add_transaction):
        await add_transaction("Food", 10, NOW - timedelta(days=1))

        assert await insights_service.tracking_streak(db_session, test_user.id, now=NOW) == 0
