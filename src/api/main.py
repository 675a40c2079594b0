"""
FastAPI application factory.
Creates the app with CORS, auth and service initialization, and router
registration. Swagger UI available at /docs, ReDoc at /redoc.
"""
import sys
from pathlib import Path
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Ensure src/ is on the path
_src_dir = str(Path(__file__).parent.parent)
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

SERVICE_NAME = "Depot Sales API"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic for the FastAPI app."""
    import config
    from api.auth.dependencies import init_auth
    from api.auth.staff_store import StaffStore
    from api.auth.tokens import StaffTokens
    from api.helpers import init_sales
    from sales_service import SalesService
    from settings_store.config_store import ConfigStore
    from settings_store.remote_store import AccountConfigStore
    from sheets.sheets_gateway import SheetsGateway
    from utils.logger import get_logger

    logger = get_logger()
    logger.info(f"Initializing {SERVICE_NAME} on port {config.API_PORT}", component="API")

    tokens = StaffTokens(
        secret=config.API_JWT_SECRET,
        algorithm=config.API_JWT_ALGORITHM,
        access_minutes=config.API_JWT_EXPIRY_MINUTES,
        refresh_days=config.API_JWT_REFRESH_EXPIRY_DAYS,
    )
    staff = StaffStore(config.API_USER_DB_PATH)
    init_auth(tokens, staff)

    sales_service = SalesService(SheetsGateway())
    config_store = ConfigStore(remote=AccountConfigStore(config.API_USER_DB_PATH))
    init_sales(sales_service, config_store)

    # Store on app state for route access
    app.state.tokens = tokens
    app.state.staff = staff
    app.state.sales_service = sales_service
    app.state.config_store = config_store

    logger.info(f"Swagger UI: http://localhost:{config.API_PORT}/docs", component="API")

    yield

    logger.info("Shutting down API server", component="API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    import config

    app = FastAPI(
        title=SERVICE_NAME,
        description=(
            "Depot point-of-sale backend. Loads the price catalog from Google Sheets, "
            "records orders in the sales and payments tabs, and renders receipts.\n\n"
            "**Authentication**: Use `/auth/login` to get a JWT token, then pass it "
            "as `Authorization: Bearer <token>` header on protected endpoints."
        ),
        version=SERVICE_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.API_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    from api.routes.auth_routes import router as auth_router
    from api.routes.catalog_routes import router as catalog_router
    from api.routes.config_routes import router as config_router
    from api.routes.order_routes import router as order_router
    from api.routes.health_routes import router as health_router

    app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    app.include_router(config_router, prefix="/config", tags=["Configuration"])
    app.include_router(catalog_router, prefix="/catalog", tags=["Catalog"])
    app.include_router(order_router, prefix="/orders", tags=["Orders"])
    app.include_router(health_router, prefix="/health", tags=["Health"])

    from api.middleware.rate_limiter import RateLimitMiddleware
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=config.API_RATE_LIMIT_PER_MINUTE,
        trust_proxy_headers=config.API_TRUST_PROXY_HEADERS,
    )

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "docs": "/docs",
            "redoc": "/redoc",
            "health": "/health",
        }

    return app
