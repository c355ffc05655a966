# backend/puzzle_tracker/api/routes/__init__.py

from .activity import router as activity_router
from .health import router as health_router
from .my_puzzles import router as my_puzzles_router
from .puzzle_status import router as puzzle_status_router

routers = [
    health_router,
    puzzle_status_router,
    my_puzzles_router,
    activity_router,
]
