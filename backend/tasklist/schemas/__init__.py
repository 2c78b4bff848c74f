"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Request schemas forbid unknown fields: updates enumerate the mutable set only
    - Response schemas never expose password hashes or one-time tokens

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
