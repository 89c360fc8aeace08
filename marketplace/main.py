# marketplace/main.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import auth, cart, shop
from .config import configure_logging, settings
from .database import create_tables
from .reconciler import CartError

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    if settings.create_tables_on_startup:
        await create_tables()
    logger.info("Marketplace API started")
    yield


app = FastAPI(
    title="Marketplace API",
    description="Users, product catalog and shopping cart",
    version="1.0.0",
    lifespan=lifespan,
)

# ✅ CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ Роутеры
app.include_router(auth.router)
app.include_router(shop.router)
app.include_router(cart.router)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # malformed bodies and ids are client errors, not 422
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _describe_validation_error(exc)},
    )


@app.exception_handler(CartError)
async def cart_exception_handler(request: Request, exc: CartError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/")
async def root():
    return {"message": "Marketplace API is running"}


if __name__ == "__main__":
    uvicorn.run("marketplace.main:app", host="0.0.0.0", port=8000, reload=True)
