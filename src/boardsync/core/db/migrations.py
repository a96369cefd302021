"""Alembic migration runner."""

from alembic.config import Config

from alembic import command


def run_migrations_sync(revision: str = "head") -> None:
    """Run Alembic migrations synchronously up to ``revision``.

    Alembic's env drives the async engine on its own event loop, so this must
    not be called from inside a running loop.
    """
    alembic_cfg = Config("alembic.ini")
    command.upgrade(alembic_cfg, revision)
