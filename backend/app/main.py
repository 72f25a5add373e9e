from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import get_settings
from app.core.database import engine, Base
from app import models  # ensure models are registered with SQLAlchemy
from app.routers import auth, events, invitations, jury, registrations
from app.utils.logger import get_logger

logger = get_logger("api")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Lumina registration API ready")
    yield
    await engine.dispose()


app = FastAPI(
    title="Lumina Registration API",
    description="Events, registrations and invitation codes for Lumina competitions and masterclasses",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
    logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
    return response

app.include_router(auth.router)
app.include_router(events.router)
app.include_router(invitations.router)
app.include_router(jury.router)
app.include_router(registrations.router)

@app.get("/")
async def root():
    return {"message": "Welcome to the Lumina Registration API"}

@app.get("/health")
async def health_check():
    return {"status": "ok"}
