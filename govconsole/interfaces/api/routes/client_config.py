"""Configuración pública que necesita el cliente de la consola."""

from fastapi import APIRouter

from govconsole.config import get_settings
from govconsole.interfaces.api.schemas import ClientConfigRead

router = APIRouter(prefix="/config", tags=["config"])


@router.get("", response_model=ClientConfigRead)
def read_client_config() -> ClientConfigRead:
    """Devuelve los identificadores públicos del despliegue."""

    settings = get_settings()
    return ClientConfigRead(
        api_key=settings.project_api_key,
        auth_domain=settings.project_auth_domain,
        project_id=settings.project_id,
        storage_bucket=settings.project_storage_bucket,
        messaging_sender_id=settings.project_messaging_sender_id,
        app_id=settings.project_app_id,
        measurement_id=settings.project_measurement_id,
        deployment_id=settings.deployment_id,
    )
