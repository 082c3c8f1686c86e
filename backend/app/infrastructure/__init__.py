"""Infrastructure Layer: database access, repository implementations, observability.

Invariants:
    - Repositories implement core/repository_protocols.py and return core records
    - ORM objects never escape this layer
"""
