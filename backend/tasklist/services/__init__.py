"""Services Layer — token, user lifecycle, list and to-do services.

Invariants:
    - Every service method takes the requester identity explicitly
    - Services receive their AsyncSession and collaborators at construction
    - Persistence failures leave a service only as adapted domain errors
    - One commit per mutating method: multi-row writes are a single transaction
"""
