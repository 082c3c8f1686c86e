"""Services Layer: AuthService and ExpenseService orchestrate core rules over repositories.

Invariants:
    - Services receive repositories and configuration through their constructors
    - Services never touch ORM models or HTTP objects
"""
