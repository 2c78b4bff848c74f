"""Infrastructure Layer — database sessions, error adaptation, mail transport, logging.

Invariants:
    - Everything that touches IO outside the ORM models lives here
    - Services receive these collaborators by injection at construction
"""
