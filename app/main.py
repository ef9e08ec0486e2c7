from fastapi import FastAPI
from loguru import logger

from app.core.logging import setup_logging
from app.core.init_db import init_db
from app.core.errors import DomainError, domain_error_handler
from app.api.router import api_router

setup_logging()
logger.info("Starting Matchmaker backend")


app = FastAPI(
    title="Matchmaker Backend",
    version="0.1.0"
)

app.add_exception_handler(DomainError, domain_error_handler)

# Matches, interests, favorites, conversations, notifications
app.include_router(api_router)

# Init DB after app is created
init_db()

@app.get("/health")
def health():
    logger.debug("Health check hit")
    return {"status": "ok"}
