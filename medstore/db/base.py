# medstore/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """All medstore tables inherit from this."""
    pass
