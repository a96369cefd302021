"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, ProjectFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.board import (
    CommentFactory,
    ProjectFactory,
    ProjectMemberFactory,
    TaskFactory,
)
from tests.factories.schemas import (
    CommentReadFactory,
    ProjectReadFactory,
    ProjectWithTasksFactory,
    TaskReadFactory,
    UserSummaryFactory,
)
from tests.factories.user import UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # User
    "UserFactory",
    # Board
    "CommentFactory",
    "ProjectFactory",
    "ProjectMemberFactory",
    "TaskFactory",
    # Read models
    "CommentReadFactory",
    "ProjectReadFactory",
    "ProjectWithTasksFactory",
    "TaskReadFactory",
    "UserSummaryFactory",
]
