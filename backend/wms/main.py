import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError

import wms.models  # noqa: F401
from wms.api.routes import api_router
from wms.core.config import get_settings
from wms.core.logs import configure_logging
from wms.db.base import Base
from wms.db.session import SessionLocal, engine
from wms.services.seed import seed_initial_data


settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title=settings.app_name)

# columns introduced after the first release: batch tracking and low-stock thresholds
RUNTIME_COLUMNS: dict[str, dict[str, str]] = {
    "stock_levels": {
        "batch_number": "VARCHAR(80)",
        "expiry_date": "DATE",
    },
    "products": {
        "min_stock": "INTEGER DEFAULT 0",
        "barcode": "VARCHAR(64)",
    },
}


def apply_runtime_schema_updates() -> None:
    inspector = inspect(engine)
    statements: list[str] = []
    for table, columns in RUNTIME_COLUMNS.items():
        existing = {column["name"] for column in inspector.get_columns(table)}
        for name, ddl in columns.items():
            if name not in existing:
                statements.append(f"ALTER TABLE {table} ADD COLUMN {name} {ddl}")
                if (table, name) == ("products", "barcode"):
                    statements.append("CREATE UNIQUE INDEX IF NOT EXISTS ix_products_barcode ON products (barcode)")

    if not statements:
        return

    with engine.begin() as conn:
        for statement in statements:
            logger.info("Applying schema update: %s", statement)
            conn.execute(text(statement))


origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup_event() -> None:
    retries = 20
    while retries > 0:
        try:
            Base.metadata.create_all(bind=engine)
            apply_runtime_schema_updates()
            break
        except OperationalError:
            retries -= 1
            if retries == 0:
                raise
            logger.warning("Database not ready, retrying (%d left)", retries)
            time.sleep(1)

    db = SessionLocal()
    try:
        seed_initial_data(db)
    finally:
        db.close()


@app.get("/")
def root() -> dict:
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "docs": "/docs",
    }


app.include_router(api_router, prefix=settings.api_prefix)
