import logging
import os
from pathlib import Path
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from starlette.middleware.sessions import SessionMiddleware

from storefront.api import router as api_router
from storefront.database import Base, engine, SessionLocal
from storefront.repository import seed_lookup_tables
from storefront.routes import router

# Force-load .env (Windows-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")

SESSION_SECRET = os.getenv("SESSION_SECRET")
if not SESSION_SECRET:
    raise RuntimeError("SESSION_SECRET is not set. Check your .env file.")

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Storefront Checkout")

app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET)

app.include_router(router)
app.include_router(api_router)


@app.exception_handler(RequestValidationError)
async def log_validation_error(request: Request, exc: RequestValidationError):
    fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
    logger.error(f"Rejected {request.method} {request.url.path}: invalid {', '.join(fields)}")
    return await request_validation_exception_handler(request, exc)


Base.metadata.create_all(bind=engine)

db = SessionLocal()
try:
    seed_lookup_tables(db)
finally:
    db.close()
