"""Declarative base shared by the local store tables."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# SQLite cannot alter unnamed constraints later
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
