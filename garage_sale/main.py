# Main application file



import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from garage_sale.database import engine, Base
from garage_sale.core.config import settings
from garage_sale.routers import (
    auth,
    images,
    sales,
    maintenance,
)
from garage_sale.services.storage import upload_dir


# LOGGING CONFIGURATION

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("app")


# DATABASE

Base.metadata.create_all(bind=engine)


# APP INIT

app = FastAPI(
    title="Garage Sale API",
    description="Listings with photos: upload, browse, buy, and manage inventory",
    version="1.0.0",
)



# CORS (Token-based auth)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ERROR RESPONSES ({"error": "..."})

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"

    if errors and errors[0].get("loc"):
        field = errors[0]["loc"][-1]
        message = f"{field}: {message}"

    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(auth.router)
app.include_router(images.router)
app.include_router(sales.router)
app.include_router(maintenance.router)


# UPLOADED IMAGES (read-only)

app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=upload_dir()),
    name="uploads",
)


# ROOT

@app.get("/")
def root():
    logger.info("Health check endpoint called")
    return {"message": "Garage Sale API is running"}
