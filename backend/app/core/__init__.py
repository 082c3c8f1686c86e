"""Core Layer: domain types, records, errors, and pure rules.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - IO is reached only through the Protocols in repository_protocols.py

Design Decisions:
    - Functional core separated from imperative shell
"""
