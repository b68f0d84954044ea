# meeting_conflicts/main.py
from fastapi import FastAPI

from meeting_conflicts.api.routes import conflicts, health, meetings
from meeting_conflicts.core.config import get_settings
from meeting_conflicts.core.logging import configure_logging
from meeting_conflicts.db.session import init_db_for_startup


def create_app() -> FastAPI:
    """
    Application factory for the Meeting Conflict Service.
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service that detects scheduling conflicts for candidate meetings,\n"
            "classifies their severity, proposes ranked alternatives (other slots,\n"
            "fewer attendees, shorter duration) and applies a chosen suggestion."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(conflicts.router)
    app.include_router(meetings.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db_for_startup()

    return app


app = create_app()
