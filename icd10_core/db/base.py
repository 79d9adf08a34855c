"""Declarative base shared by every ICD-10 Core model."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
