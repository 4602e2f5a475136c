# urban_harvest/main.py
import uvicorn

from urban_harvest.api import create_app
from urban_harvest.data.database import Base, engine
from urban_harvest.data import models  # noqa: F401  registers every table
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

logger.info(f"Creating tables: {sorted(Base.metadata.tables.keys())}")
try:
    Base.metadata.create_all(bind=engine)
except Exception:
    logger.exception("Failed to create tables")
    raise

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
