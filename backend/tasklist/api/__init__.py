"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint answers with the {status, message, data, error} envelope

Design Decisions:
    - Thin routes delegate to services; authorization lives in the services
"""
