"""API routes package."""

from server.routes.account_routes import router as account_router
from server.routes.folder_routes import router as folder_router
from server.routes.file_routes import router as file_router
from server.routes.trash_routes import router as trash_router
from server.routes.recent_routes import router as recent_router
from server.routes.public_routes import router as public_router

__all__ = [
    "account_router",
    "folder_router",
    "file_router",
    "trash_router",
    "recent_router",
    "public_router",
]
