"""
Unit Tests for the transaction service
Tests for: filters, sorting, monthly summary, CSV export
"""
from datetime import datetime

import pytest

from kharcha.core.exceptions import AccountNotFoundError, ValidationError
from kharcha.models import Account, AccountType
from kharcha.models.outflow_type import MONEY_LENT, SUBSCRIPTION
from kharcha.schemas.transaction import TransactionCreate, TransactionFilters
from kharcha.services.outflow_type_service import outflow_type_service
from kharcha.services.transaction_service import CSV_HEADERS, transaction_service


class TestCreate:

    async def test_create_stores_metadata(self, db_session, test_user, test_account):
        subscription = await outflow_type_service.get_by_name(db_session, test_user.id, SUBSCRIPTION)

        transaction = await transaction_service.create(db_session, test_user.id, TransactionCreate(
            amount=499,
            date=datetime(2024, 6, 1),
            account_id=test_account.id,
            outflow_type_id=subscription.id,
            note="  Netflix plan ",
            metadata={"provider": "Netflix", "remind": True},
        ))

        assert transaction.meta == {"provider": "Netflix", "remind": True}
        assert transaction.note == "Netflix plan"
        assert transaction.outflow_type.name == SUBSCRIPTION
        assert transaction.account.name == test_account.name

    async def test_create_rejects_foreign_account(self, db_session, test_user, other_user):
        foreign = Account(user_id=other_user.id, name="Not mine", type=AccountType.CASH)
        db_session.add(foreign)
        await db_session.flush()
        food = await outflow_type_service.get_by_name(db_session, test_user.id, "Food")

        with pytest.raises(AccountNotFoundError):
            await transaction_service.create(db_session, test_user.id, TransactionCreate(
                amount=10, date=datetime(2024, 6, 1), account_id=foreign.id, outflow_type_id=food.id,
            ))


class TestListing:

    async def test_filters_and_total(self, db_session, test_user, add_transaction):
        await add_transaction("Food", 120, datetime(2024, 6, 1), note="Lunch with team")
        await add_transaction("Food", 80, datetime(2024, 6, 2), note="Groceries")
        await add_transaction("Transport", 300, datetime(2024, 6, 3), note="Cab to airport")

        items, total = await transaction_service.list_for_user(
            db_session, test_user.id, TransactionFilters(search="lunch")
        )
        assert total == 1
        assert items[0].amount == 120

        items, total = await transaction_service.list_for_user(
            db_session, test_user.id,
            TransactionFilters(start_date=datetime(2024, 6, 2), end_date=datetime(2024, 6, 3)),
        )
        assert [t.amount for t in items] == [80]

    async def test_sort_and_paginate(self, db_session, test_user, add_transaction):
        for amount, day in ((50, 1), (500, 2), (5, 3)):
            await add_transaction("Food", amount, datetime(2024, 6, day))

        items, total = await transaction_service.list_for_user(
            db_session, test_user.id, TransactionFilters(sort_by="amount", sort_order="asc", limit=2)
        )

        assert total == 3
        assert [t.amount for t in items] == [5, 50]

        items, _ = await transaction_service.list_for_user(db_session, test_user.id, TransactionFilters())
        assert [t.amount for t in items] == [5, 500, 50]

    async def test_other_users_are_invisible(self, db_session, other_user, add_transaction):
        await add_transaction("Food", 120, datetime(2024, 6, 1))

        items, total = await transaction_service.list_for_user(db_session, other_user.id, TransactionFilters())

        assert items == []
        assert total == 0


class TestMonthlySummary:

    async def test_total_and_top_types(self, db_session, test_user, add_transaction):
        await add_transaction("Food", 100, datetime(2024, 6, 1))
        await add_transaction("Food", 50, datetime(2024, 6, 20))
        await add_transaction("Transport", 400, datetime(2024, 6, 5))
        await add_transaction("Shopping", 999, datetime(2024, 5, 31))

        summary = await transaction_service.monthly_summary(db_session, test_user.id, "2024-06")

        assert summary.total == 550
        assert summary.count == 3
        assert [(t.name, t.total) for t in summary.top_types] == [("Transport", 400), ("Food", 150)]

    async def test_at_most_five_types(self, db_session, test_user, add_transaction):
        for i, name in enumerate(["Food", "Transport", "Shopping", "Bills", "Other", SUBSCRIPTION]):
            await add_transaction(name, 10 * (i + 1), datetime(2024, 6, 1))

        summary = await transaction_service.monthly_summary(db_session, test_user.id, "2024-06")

        assert len(summary.top_types) == 5
        assert "Food" not in [t.name for t in summary.top_types]

    async def test_empty_month(self, db_session, test_user):
        summary = await transaction_service.monthly_summary(db_session, test_user.id, "2024-06")

        assert summary.total == 0
        assert summary.top_types == []

    async def test_invalid_month(self, db_session, test_user):
        with pytest.raises(ValidationError):
            await transaction_service.monthly_summary(db_session, test_user.id, "June")


class TestCsvExport:

    async def test_header_and_rows(self, db_session, test_user, add_transaction):
        await add_transaction(SUBSCRIPTION, 499, datetime(2024, 6, 1), note="Netflix plan", provider="Netflix")
        await add_transaction(MONEY_LENT, 2500.5, datetime(2024, 6, 2), note='Said "soon"', borrower_name="Ravi")

        items, _ = await transaction_service.list_for_user(
            db_session, test_user.id, TransactionFilters(sort_order="asc")
        )
        lines = transaction_service.export_csv(items).splitlines()

        assert lines[0] == ",".join(f'"{h}"' for h in CSV_HEADERS)
        assert lines[1] == '"2024-06-01","499","Subscription","HDFC Savings","Bank","Netflix plan","Netflix"'
        assert lines[2] == '"2024-06-02","2500.5","Money Lent","HDFC Savings","Bank","Said ""soon""","Ravi"'

    def test_empty_export_has_header_only(self):
        assert transaction_service.export_csv([]).splitlines() == [",".join(f'"{h}"' for h in CSV_HEADERS)]
