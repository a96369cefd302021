"""Base factory configuration for polyfactory."""

from uuid import uuid4

from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory

from src.boardsync.models.base import utc_now

__all__ = ["BaseFactory", "generate_uuid", "utc_now"]


def generate_uuid():
    return uuid4()


class BaseFactory(SQLAlchemyFactory):
    """Base factory with common configuration for all models.

    Relationships and foreign keys are never generated; tests pass owner,
    project and task ids explicitly.
    """

    __is_base_factory__ = True
    __set_relationships__ = False
    __set_foreign_keys__ = False
