"""FastAPI application entry point"""
from contextlib import asynccontextmanager
from typing import Optional
import asyncio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from helpdesk.infrastructure.config.settings import Settings, settings as default_settings
from helpdesk.infrastructure.database.base import Database
from helpdesk.infrastructure.init_data import init_default_admin
from helpdesk.presentation.api.v1.routers import auth, comments, tickets, users


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application around an explicit settings object and database handle"""
    settings = settings or default_settings
    database = database or Database(settings.get_database_url(), echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize the database on startup and dispose it on shutdown"""
        print("🚀 Initializing application...")
        database.init()
        await init_default_admin(database, settings)

        try:
            yield
        except (KeyboardInterrupt, asyncio.CancelledError):
            # Normal shutdown - don't log as error
            pass
        finally:
            database.dispose()
            print("👋 Shutting down application...")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # Credentials are needed for the session cookie, so origins must be explicit
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )

    # Include routers
    app.include_router(auth.router, prefix=settings.API_V1_PREFIX)
    app.include_router(users.router, prefix=settings.API_V1_PREFIX)
    app.include_router(tickets.router, prefix=settings.API_V1_PREFIX)
    app.include_router(comments.router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok"}

    return app


app = create_app()
