# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from config import settings
from database import init_db
from services.exceptions import LedgerError

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Router imports
from routes.auth import router as auth_router
from routes.products import router as products_router
from routes.employees import router as employees_router
from routes.stock import router as stock_router
from routes.transactions import router as transactions_router
from routes.logs import router as logs_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database ready")
    yield


app = FastAPI(title="Clinic IMS API", version="1.0.0",
              description="API for the Clinic Inventory Management System", lifespan=lifespan)


# Ledger errors carry their own status code and machine-readable code
@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Plain HTTP errors use the same {"message": ...} body as ledger errors
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail},
                        headers=getattr(exc, "headers", None))


app.include_router(auth_router)
app.include_router(products_router)
app.include_router(employees_router)
app.include_router(stock_router)
app.include_router(transactions_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Clinic IMS API is running"}
