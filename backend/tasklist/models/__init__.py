"""ORM Models — SQLAlchemy declarative models for users, lists and to-dos.

Invariants:
    - All models inherit from Base (db/base.py)
    - TaskList is the aggregate root for its to-dos (list_items association)
    - ToDo carries no owner column; ownership is resolved through list_items

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from tasklist.models.user import User  # noqa: F401
from tasklist.models.task_list import TaskList, list_items  # noqa: F401
from tasklist.models.todo import ToDo  # noqa: F401
