"""FastAPI application entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from farmledger.config import get_settings
from farmledger.database import init_db
from farmledger.errors import FarmLedgerError
from farmledger.logging_config import setup_logging
from farmledger.routers import auth, breakeven, expenses, farms, sales

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    await init_db()
    logger.info("FarmLedger API started ({})", settings.app_env)
    yield


app = FastAPI(
    title="FarmLedger",
    description="Farm sales, expenses and break-even profitability projections",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FarmLedgerError)
async def farmledger_error_handler(request: Request, exc: FarmLedgerError):
    logger.warning("{} {} -> {}: {}", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth.router)
app.include_router(farms.router)
app.include_router(breakeven.router)
app.include_router(sales.router)
app.include_router(expenses.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
