from src.boardsync.services.admin_service import AdminService
from src.boardsync.services.auth_service import AuthService
from src.boardsync.services.comment_service import CommentService
from src.boardsync.services.project_service import ProjectService
from src.boardsync.services.task_service import TaskService

__all__ = ["AdminService", "AuthService", "CommentService", "ProjectService", "TaskService"]
