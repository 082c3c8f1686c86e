"""ORM Models: SQLAlchemy declarative models for users and expenses.

Invariants:
    - All models inherit from Base (db/base.py)
    - ORM objects stay in the shell; repositories convert them to core records

Design Decisions:
    - One file per entity for locality
    - All models imported here so metadata is complete before create_all / alembic
"""

from app.models.user import User  # noqa: F401
from app.models.expense import Expense  # noqa: F401
