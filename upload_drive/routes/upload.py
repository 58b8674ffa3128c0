from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..config import settings
from ..services.mailer import MailTransport, SmtpMailTransport
from ..services.upload_handler import UploadHandler
from ..storage.drive_provider import DriveStorageProvider
from ..storage.local_provider import LocalStorageProvider
from ..storage.provider import StorageProvider


router = APIRouter(tags=["upload"])


def get_storage() -> StorageProvider:
    """
    Build the storage provider for one invocation.
    ``STORAGE_PROVIDER=local`` writes the folder tree to the local disk for development;
    anything else uses Google Drive and requires the OAuth env vars.
    """
    if settings.storage_provider == "local":
        return LocalStorageProvider()
    return DriveStorageProvider()


def get_mailer() -> MailTransport:
    return SmtpMailTransport()


def get_upload_handler() -> UploadHandler:
    # Clients are built lazily inside the handler, only for the steps that need them
    return UploadHandler(storage_factory=get_storage, mailer_factory=get_mailer)


@router.post("/upload-drive")
@router.post("/.netlify/functions/upload-drive", include_in_schema=False)
async def upload_drive(request: Request, handler: UploadHandler = Depends(get_upload_handler)):
    body = await request.body()
    result = await run_in_threadpool(handler.handle_body, body)
    return JSONResponse(status_code=result.status_code, content=result.to_response())
