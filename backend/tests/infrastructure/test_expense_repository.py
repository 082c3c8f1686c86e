"""SQL Expense Repository: owner scoping, ordering, pagination, aggregates.

Tests cover:
    - find_by_id / save / delete never cross owners
    - date DESC, created_at DESC ordering; total counted before LIMIT/OFFSET
    - inclusive date bounds and category filter
    - aggregate(): overall, per category (sum DESC), per day (date ASC), empty window
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.domain_types import ExpenseId, UserId
from app.core.errors import ExpenseNotFoundError
from app.core.records import ExpenseFilter, NewExpense, NewUser, StatsWindow
from app.infrastructure.expense_repository import SqlExpenseRepository
from app.infrastructure.user_repository import SqlUserRepository

BASE_TIME = datetime(2024, 3, 15, 8, 0, tzinfo=timezone.utc)
MARCH = StatsWindow(
    start=datetime(2024, 3, 1, 0, 0, 0),
    end=datetime(2024, 3, 31, 23, 59, 59),
)


@pytest.fixture
def repo(test_db):
    return SqlExpenseRepository(test_db)


@pytest.fixture
async def owners(test_db):
    users = SqlUserRepository(test_db)
    a = await users.create(NewUser("Alice", "alice@example.com", "h"))
    b = await users.create(NewUser("Bob", "bob@example.com", "h"))
    return a.id, b.id


def _expense(owner, amount, category, day, minutes=0, note=None):
    created = BASE_TIME + timedelta(minutes=minutes)
    return NewExpense(
        user_id=owner, amount=Decimal(amount), category=category,
        date=date.fromisoformat(day), note=note,
        created_at=created, updated_at=created,
    )


async def test_create_round_trip(repo, owners):
    alice, _ = owners
    created = await repo.create(_expense(alice, "12345.67", "makanan", "2024-03-15", note="n"))

    fetched = await repo.find_by_id(created.id, alice)

    assert fetched.amount == Decimal("12345.67")
    assert fetched.category == "makanan"
    assert fetched.date == date(2024, 3, 15)
    assert fetched.note == "n"


async def test_find_by_id_is_owner_scoped(repo, owners):
    alice, bob = owners
    created = await repo.create(_expense(alice, "10", "makanan", "2024-03-15"))

    assert await repo.find_by_id(created.id, bob) is None
    assert await repo.find_by_id(ExpenseId(uuid4()), alice) is None


async def test_save_updates_fields(repo, owners):
    alice, _ = owners
    record = await repo.create(_expense(alice, "10", "makanan", "2024-03-15"))
    record.note = "dinner"
    record.amount = Decimal("11.50")
    record.updated_at = BASE_TIME + timedelta(hours=2)

    await repo.save(record)
    fetched = await repo.find_by_id(record.id, alice)

    assert fetched.note == "dinner"
    assert fetched.amount == Decimal("11.50")


async def test_save_refuses_foreign_owner(repo, owners):
    alice, bob = owners
    record = await repo.create(_expense(alice, "10", "makanan", "2024-03-15"))
    record.user_id = bob

    with pytest.raises(ExpenseNotFoundError):
        await repo.save(record)


async def test_delete_is_owner_scoped(repo, owners):
    alice, bob = owners
    record = await repo.create(_expense(alice, "10", "makanan", "2024-03-15"))

    await repo.delete(record.id, bob)
    assert await repo.find_by_id(record.id, alice) is not None

    await repo.delete(record.id, alice)
    assert await repo.find_by_id(record.id, alice) is None


async def test_find_filtered_order_and_pagination(repo, owners):
    alice, bob = owners
    ids = []
    for i, day in enumerate(["2024-03-01", "2024-03-03", "2024-03-03", "2024-03-05", "2024-03-02"]):
        ids.append((await repo.create(_expense(alice, "1", "makanan", day, minutes=i))).id)
    await repo.create(_expense(bob, "1", "makanan", "2024-03-04"))

    page, total = await repo.find_filtered(ExpenseFilter(user_id=alice, limit=2, offset=0))
    everything, _ = await repo.find_filtered(ExpenseFilter(user_id=alice, limit=10))

    assert total == 5
    assert len(page) == 2
    # 03-05, then the two 03-03 rows newest-created first, then 03-02, 03-01
    assert [r.id for r in everything] == [ids[3], ids[2], ids[1], ids[4], ids[0]]
    assert [r.id for r in page] == [ids[3], ids[2]]


async def test_find_filtered_offset(repo, owners):
    alice, _ = owners
    for day in ["2024-03-01", "2024-03-02", "2024-03-03"]:
        await repo.create(_expense(alice, "1", "makanan", day))

    page, total = await repo.find_filtered(ExpenseFilter(user_id=alice, limit=10, offset=2))

    assert total == 3
    assert [r.date.day for r in page] == [1]


async def test_find_filtered_bounds_inclusive_and_category(repo, owners):
    alice, _ = owners
    await repo.create(_expense(alice, "1", "makanan", "2024-03-01"))
    await repo.create(_expense(alice, "1", "makanan", "2024-03-05"))
    await repo.create(_expense(alice, "1", "hiburan", "2024-03-07"))
    await repo.create(_expense(alice, "1", "makanan", "2024-03-10"))
    await repo.create(_expense(alice, "1", "makanan", "2024-03-11"))

    records, total = await repo.find_filtered(ExpenseFilter(
        user_id=alice, start_date=date(2024, 3, 5), end_date=date(2024, 3, 10),
        category="makanan",
    ))

    assert total == 2
    assert [r.date.day for r in records] == [10, 5]


async def test_aggregate(repo, owners):
    alice, bob = owners
    await repo.create(_expense(alice, "10.00", "makanan", "2024-03-01"))
    await repo.create(_expense(alice, "15.50", "makanan", "2024-03-15"))
    await repo.create(_expense(alice, "40.00", "transportasi", "2024-03-15"))
    await repo.create(_expense(alice, "99.00", "makanan", "2024-02-29"))
    await repo.create(_expense(alice, "99.00", "makanan", "2024-04-01"))
    await repo.create(_expense(bob, "99.00", "makanan", "2024-03-15"))

    stats = await repo.aggregate(alice, MARCH)

    assert stats.total == Decimal("65.50")
    assert stats.count == 3
    assert [(c.category, c.total, c.count) for c in stats.by_category] == [
        ("transportasi", Decimal("40.00"), 1),
        ("makanan", Decimal("25.50"), 2),
    ]
    assert [(d.date, d.total) for d in stats.daily_trend] == [
        (date(2024, 3, 1), Decimal("10.00")),
        (date(2024, 3, 15), Decimal("55.50")),
    ]


async def test_aggregate_empty_window(repo, owners):
    alice, _ = owners

    stats = await repo.aggregate(alice, MARCH)

    assert stats.total == 0
    assert stats.count == 0
    assert stats.by_category == []
    assert stats.daily_trend == []


async def test_aggregate_window_edges_are_inclusive(repo, owners):
    alice, _ = owners
    await repo.create(_expense(alice, "1.00", "lainnya", "2024-03-01"))
    await repo.create(_expense(alice, "2.00", "lainnya", "2024-03-31"))

    stats = await repo.aggregate(alice, MARCH)

    assert stats.count == 2
    assert stats.total == Decimal("3.00")


async def test_aggregate_unknown_owner(repo, owners):
    alice, _ = owners
    await repo.create(_expense(alice, "1.00", "lainnya", "2024-03-10"))

    stats = await repo.aggregate(UserId(uuid4()), MARCH)

    assert stats.count == 0
