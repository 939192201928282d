import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine.url import make_url

from storefront.auth.router import router as user_router
from storefront.categories.router import router as category_router
from storefront.comments.router import router as comments_router
from storefront.core.config import settings
from storefront.core.errors import install_error_handlers
from storefront.db.init_db import init_db
from storefront.leads.router import router as leads_router
from storefront.products.images import upload_dir
from storefront.products.router import router as product_router
from storefront.system.router import router as system_router
from storefront.system.security_headers import SecurityHeadersMiddleware
from storefront.system.timeout import RequestTimeoutMiddleware

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Storefront CRM",
    version="0.1.0",
)

install_error_handlers(app)

app.add_middleware(RequestTimeoutMiddleware, timeout=settings.REQUEST_TIMEOUT_SECONDS)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


@app.on_event("startup")
def on_startup() -> None:
    db_url = make_url(settings.DATABASE_URL)
    logger.info(
        "Config sanity: env=%s db_host=%s cors_origins=%s access_exp_min=%s refresh_exp_days=%s",
        settings.ENV,
        db_url.host or "local",
        len(settings.CORS_ORIGINS),
        settings.ACCESS_TOKEN_EXP_MINUTES,
        settings.REFRESH_TOKEN_EXP_DAYS,
    )
    init_db()


# --- Routers ---
app.include_router(user_router, prefix="/api/v1/user", tags=["user"])
app.include_router(product_router, prefix="/api/v1/product", tags=["product"])
app.include_router(leads_router, prefix="/api/v1/leads", tags=["leads"])
app.include_router(comments_router, prefix="/api/v1/comments", tags=["comments"])
app.include_router(category_router, prefix="/api/v1/category", tags=["category"])
app.include_router(system_router, tags=["system"])

app.mount("/uploads", StaticFiles(directory=str(upload_dir())), name="uploads")
