"""
GreenRewards Backend — FastAPI application entry‑point.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from app.config import settings
from app.database import Base, SessionLocal, engine
from app.deps import issue_visitor_cookie

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(name)-30s  %(levelname)-5s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure data dir + tables exist
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    # Import models so Base.metadata knows about them
    import app.community.models  # noqa: F401
    import app.rewards.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready (%s)", settings.DATABASE_URL)

    if settings.SEED_DEMO_DATA:
        from app.seed import seed_demo_data
        db = SessionLocal()
        try:
            seed_demo_data(db)
        except Exception as e:
            db.rollback()
            logger.warning("Failed to seed demo data on startup: %s", e)
        finally:
            db.close()

    yield
    logger.info("Shutting down")


app = FastAPI(
    title="GreenRewards",
    description="Receipt rewards, withdrawals, donations and fund transparency",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
)
app.middleware("http")(issue_visitor_cookie)


@app.get("/")
async def root():
    return {"service": "GreenRewards", "version": "0.1.0", "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# ── Register API routers ─────────────────────────────────────────────────
from app.rewards.routers.receipts import router as receipts_router  # noqa: E402
from app.rewards.routers.rewards import router as rewards_router  # noqa: E402
from app.rewards.routers.admin import router as rewards_admin_router  # noqa: E402
from app.community.routers.vendors import router as vendors_router  # noqa: E402
from app.community.routers.donations import router as donations_router  # noqa: E402
from app.community.routers.admin_auth import router as admin_auth_router  # noqa: E402

app.include_router(receipts_router, prefix="/api", tags=["Receipts"])
app.include_router(rewards_router, prefix="/api", tags=["Rewards"])
app.include_router(rewards_admin_router, prefix="/api", tags=["Admin Review"])
app.include_router(vendors_router, prefix="/api", tags=["Vendors"])
app.include_router(donations_router, prefix="/api", tags=["Donations & Fund"])
app.include_router(admin_auth_router, prefix="/api", tags=["Admin Auth"])
