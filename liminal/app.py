import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from liminal.routes import router
from liminal import storage

load_dotenv(Path(__file__).parent.parent / ".env")

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


def create_app(data_dir: Path | None = None) -> FastAPI:
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
    storage.init_storage(resolved)

    app = FastAPI(title="Liminal")
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()
