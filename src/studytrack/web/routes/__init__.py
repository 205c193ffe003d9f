"""Route handlers for the Web API."""

from studytrack.web.routes.activity import router as activity_router
from studytrack.web.routes.articles import router as articles_router
from studytrack.web.routes.auth import router as auth_router
from studytrack.web.routes.bookmarks import router as bookmarks_router
from studytrack.web.routes.health import router as health_router
from studytrack.web.routes.notes import router as notes_router
from studytrack.web.routes.progress import router as progress_router
from studytrack.web.routes.questions import router as questions_router
from studytrack.web.routes.quiz import router as quiz_router
from studytrack.web.routes.search import router as search_router
from studytrack.web.routes.subjects import router as subjects_router
from studytrack.web.routes.topics import router as topics_router

__all__ = [
    "activity_router",
    "articles_router",
    "auth_router",
    "bookmarks_router",
    "health_router",
    "notes_router",
    "progress_router",
    "questions_router",
    "quiz_router",
    "search_router",
    "subjects_router",
    "topics_router",
]
