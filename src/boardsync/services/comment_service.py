"""Comment operations.

Creating or deleting a comment adjusts the parent task's ``comment_count`` in
the same transaction, with a single atomic UPDATE, so the counter always
equals the number of comment rows for the task.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.boardsync.core.exceptions import NotFound
from src.boardsync.core.logging import get_logger
from src.boardsync.models import Comment, User
from src.boardsync.realtime import BoardEvent, RoomManager
from src.boardsync.realtime.events import CommentAdded, CommentDeleted
from src.boardsync.repositories import (
    CommentRepository,
    ProjectRepository,
    TaskRepository,
    UserRepository,
)
from src.boardsync.schemas.comment import CommentCreate, CommentRead
from src.boardsync.schemas.user import UserSummary
from src.boardsync.services.access import AccessGuard, require_comment_author

logger = get_logger(__name__)


def _to_read(comment: Comment, author: User) -> CommentRead:
    return CommentRead(
        id=comment.id,
        content=comment.content,
        task_id=comment.task_id,
        created_by=UserSummary.model_validate(author),
        created_at=comment.created_at,
    )


class CommentService:
    def __init__(
        self,
        comment_repo: CommentRepository,
        task_repo: TaskRepository,
        project_repo: ProjectRepository,
        user_repo: UserRepository,
        session: AsyncSession,
        rooms: RoomManager,
    ):
        self.comment_repo = comment_repo
        self.task_repo = task_repo
        self.user_repo = user_repo
        self.session = session
        self.rooms = rooms
        self.guard = AccessGuard(project_repo, task_repo)

    async def list_for_task(self, task_id: UUID, user_id: UUID) -> list[CommentRead]:
        """Comments on a task, newest first, with their authors."""
        await self.guard.authorize_task(task_id, user_id)
        comments = await self.comment_repo.list_by_task(task_id)
        authors = await self.user_repo.get_many(c.created_by_id for c in comments)
        return [
            _to_read(c, authors[c.created_by_id])
            for c in comments
            if c.created_by_id in authors
        ]

    async def create(self, author: User, data: CommentCreate) -> CommentRead:
        task, _ = await self.guard.authorize_task(data.task_id, author.id)

        comment = Comment(content=data.content, task_id=task.id, created_by_id=author.id)
        self.comment_repo.add(comment)
        try:
            await self.session.flush()
            await self.task_repo.increment_comment_count(task.id)
            await self.session.commit()
            await self.session.refresh(comment)
        except Exception:
            await self.session.rollback()
            raise

        read = _to_read(comment, author)
        await self.rooms.publish(
            task.project_id,
            BoardEvent.COMMENT_ADDED,
            CommentAdded(task_id=task.id, project_id=task.project_id, comment=read),
        )
        return read

    async def delete(self, comment_id: UUID, user_id: UUID) -> None:
        """Author-only delete.

        Raises:
            NotFound: The comment does not exist.
            Forbidden: The caller did not write the comment.
        """
        comment = await self.comment_repo.get_by_id(comment_id)
        if comment is None:
            raise NotFound("Comment not found")
        require_comment_author(comment, user_id)

        task_id = comment.task_id
        task = await self.task_repo.get_by_id(task_id)
        try:
            await self.comment_repo.delete(comment)
            decremented = await self.task_repo.decrement_comment_count(task_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if not decremented:
            logger.warning(
                "Comment count already zero on delete",
                task_id=str(task_id),
                comment_id=str(comment_id),
            )
        if task is not None:
            await self.rooms.publish(
                task.project_id,
                BoardEvent.COMMENT_DELETED,
                CommentDeleted(task_id=task_id, project_id=task.project_id, comment_id=comment_id),
            )
