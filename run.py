import os

import uvicorn

from storagehub.core.config import settings


def run_migrations():
    """Run Alembic migrations."""
    try:
        from alembic.config import Config
        from alembic import command

        alembic_cfg = Config("alembic.ini")
        print("[STARTUP] Running database migrations...")
        command.upgrade(alembic_cfg, "head")
        print("[STARTUP] Migrations complete!")
        return True
    except Exception as e:
        print(f"[WARN] Migration failed: {e}")
        return False


if __name__ == "__main__":
    # Tables are created on app startup anyway; migrations are opt-in
    if os.getenv("RUN_MIGRATIONS") == "true":
        if not run_migrations():
            print("[WARN] Falling back to direct table creation on startup...")

    print(f"[STARTUP] Server binding to host={settings.HOST} port={settings.PORT}")
    uvicorn.run(
        "storagehub.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
        workers=1,
    )
