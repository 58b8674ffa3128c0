from fastapi import APIRouter

from ..config import settings


router = APIRouter(prefix="/integrations", tags=["integrations"])


@router.get("/status")
def status():
    drive_ok = bool(
        settings.google_client_id and settings.google_client_secret and settings.google_refresh_token
    )
    smtp_ok = bool(settings.mail_user and settings.mail_password)
    return {
        "drive": drive_ok,
        "smtp": smtp_ok,
        "storage_provider": settings.storage_provider,
    }
