import sys

import uvicorn

from src.boardsync.core.config import get_settings
from src.boardsync.core.db import run_migrations_sync


def main() -> None:
    """Serve the API, or ``boardsync migrate [revision]`` to upgrade the schema."""
    args = sys.argv[1:]
    if args and args[0] == "migrate":
        run_migrations_sync(args[1] if len(args) > 1 else "head")
        return

    settings = get_settings()
    uvicorn.run(
        "src.boardsync.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
