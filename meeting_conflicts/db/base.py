# meeting_conflicts/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models in the Meeting Conflict Service.

    Model modules are imported by `meeting_conflicts.db.session` so that
    Base.metadata knows every table before create_all runs.
    """
    pass
