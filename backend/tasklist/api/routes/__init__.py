"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain business logic (delegate to services)
    - Path identifiers arrive as str so malformed ids surface as InvalidIdError
"""
