"""
Ledger API Application Factory
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .accounts import router as accounts_router
from .banking import router as banking_router
from .system import LedgerSystem, get_ledger_system


def create_app(system: Optional[LedgerSystem] = None) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        system: Ledger system to serve; the global one is used when omitted
    """
    app = FastAPI(
        title="Chequing & Savings Ledger API",
        description="In-memory ledger for chequing and savings accounts",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if system is not None:
        app.dependency_overrides[get_ledger_system] = lambda: system

    app.include_router(banking_router, prefix="/api", tags=["Commands"])
    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "bank_ledger_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Chequing & Savings Ledger API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "commands": "/api/banking",
                "accounts": "/accounts",
            }
        }

    return app
