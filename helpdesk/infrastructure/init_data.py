"""Initialize default data"""
from helpdesk.application.use_cases.user_use_cases import UserUseCases
from helpdesk.infrastructure.config.settings import Settings
from helpdesk.infrastructure.database.base import Database
from helpdesk.infrastructure.repositories.user_repository_db import UserRepositoryDB


async def init_default_admin(database: Database, settings: Settings) -> None:
    """Create the default admin account from settings if missing."""
    if not settings.DEFAULT_ADMIN_EMAIL or not settings.DEFAULT_ADMIN_PASSWORD:
        print("⚠️ Default admin not configured, skipping")
        return

    with database.session_scope() as db:
        use_cases = UserUseCases(UserRepositoryDB(db))
        created = await use_cases.ensure_admin_exists(
            settings.DEFAULT_ADMIN_NAME,
            settings.DEFAULT_ADMIN_EMAIL,
            settings.DEFAULT_ADMIN_PASSWORD,
        )
    if created:
        print(f"✅ Default admin created: {settings.DEFAULT_ADMIN_EMAIL}")
    else:
        print(f"✅ Default admin '{settings.DEFAULT_ADMIN_EMAIL}' already exists")
