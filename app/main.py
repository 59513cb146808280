from fastapi import FastAPI  # type: ignore

from app.config import get_settings
from app.logging_config import setup_logging
from app.routers import diagnose

# Bad env config fails here, at startup, not per request
setup_logging(get_settings().log_level)

app = FastAPI(title="Vehicle Diagnostic Plan API")

app.include_router(diagnose.router)


@app.get("/")
async def health():
    return {"status": "ok"}
