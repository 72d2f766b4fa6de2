# novara/main.py
import uvicorn

from novara.api import create_app
from novara.data.database import Base, engine
from novara.utils.logging import get_logger

# register every model on Base.metadata before create_all
from novara.data import models  # noqa: F401

logger = get_logger(__name__)

logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
try:
    Base.metadata.create_all(bind=engine)
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
