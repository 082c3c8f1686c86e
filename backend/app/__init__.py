"""Expense Tracker Application Package: personal expense tracking API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
