from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from storefront.core.config import settings
from storefront.core.database import engine, Base, SessionLocal
from storefront.core.error_handlers import register_exception_handlers
from storefront.core.firebase import init_firebase
from storefront.services.plan_catalog import PlanCatalog
from storefront.services.storage import SessionPlanSource
from storefront.api.v1.router import api_router
import storefront.models  # noqa: F401  registers tables on Base.metadata
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Initialize Firebase
init_firebase()

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Storefront API",
    version="1.0.0",
    debug=settings.debug,
    redirect_slashes=False,
)

# One plan catalog per process; instances do not share or invalidate each other's cache
app.state.plan_catalog = PlanCatalog(
    SessionPlanSource(SessionLocal),
    ttl_seconds=settings.plans_cache_ttl_seconds,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix=settings.api_v1_str)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
