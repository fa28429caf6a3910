from fastapi import FastAPI

from .auth import router as auth_router
from .client_config import router as client_config_router
from .console import router as console_router
from .rules import router as rules_router
from .sync import router as sync_router
from .violations import router as violations_router


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(auth_router)
    app.include_router(client_config_router)
    app.include_router(rules_router)
    app.include_router(violations_router)
    app.include_router(sync_router)
    app.include_router(console_router)
