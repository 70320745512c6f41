"""
Retail CRM Analytics API - Main Application.

FastAPI application with CORS enabled for the dashboard frontend.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.models import ErrorResponse
from config.settings import configure_logging, get_settings
from repositories.store import RepositoryError

configure_logging(get_settings())

# Create FastAPI application
app = FastAPI(
    title="Retail CRM Analytics API",
    description="Dashboard KPIs, contacts, catalog pricing and order totals for the shop back office",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS - Allow all origins for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RepositoryError)
async def repository_error_handler(request: Request, exc: RepositoryError):
    """Datastore failures surface as 502 with the standard error body."""
    body = ErrorResponse(error="Datastore unavailable", detail=str(exc), status_code=502)
    return JSONResponse(status_code=502, content=body.model_dump())


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status, version and the configured data backend.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "retail-crm-analytics-api",
        "backend": get_settings().data_backend,
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Retail CRM Analytics API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import contacts, dashboard, orders, products

app.include_router(dashboard.router, prefix="/api/v1", tags=["Dashboard"])
app.include_router(contacts.router, prefix="/api/v1", tags=["Contacts"])
app.include_router(products.router, prefix="/api/v1", tags=["Products"])
app.include_router(orders.router, prefix="/api/v1", tags=["Orders"])
