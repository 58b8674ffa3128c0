"""
Google Drive v3 storage provider.
Talks to the REST API directly, authenticating with an OAuth refresh token.
"""
import json
import uuid
from typing import Any, Dict, Optional

import httpx
import structlog

from ..config import settings
from ..errors import DriveAPIError
from .provider import StorageProvider


TOKEN_URL = "https://oauth2.googleapis.com/token"
FILES_URL = "https://www.googleapis.com/drive/v3/files"
UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
FOLDER_MIME = "application/vnd.google-apps.folder"
VIEW_LINK_TEMPLATE = "https://drive.google.com/file/d/{file_id}/view"

logger = structlog.get_logger(__name__)


def escape_query_value(value: str) -> str:
    return str(value).replace("\\", "\\\\").replace("'", "\\'")


def folder_query(name: str, parent_id: str) -> str:
    return " and ".join([
        f"'{escape_query_value(parent_id)}' in parents",
        f"mimeType='{FOLDER_MIME}'",
        f"name='{escape_query_value(name)}'",
        "trashed=false",
    ])


def _error_message(response: httpx.Response) -> str:
    """Pull Google's own error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    if isinstance(body, dict) and body.get("error_description"):
        return body["error_description"]
    if isinstance(error, str):
        return error
    return f"HTTP {response.status_code}"


class DriveStorageProvider(StorageProvider):
    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        refresh_token: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.client_id = client_id or settings.google_client_id
        self.client_secret = client_secret or settings.google_client_secret
        self.refresh_token = refresh_token or settings.google_refresh_token
        self.redirect_uri = redirect_uri or settings.google_redirect_uri
        if not self.client_id or not self.client_secret or not self.refresh_token:
            raise RuntimeError("ENV mancanti per OAuth")
        self.timeout = timeout or settings.http_timeout
        self._transport = transport
        self._access_token: Optional[str] = None

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def _get_access_token(self) -> str:
        if self._access_token:
            return self._access_token
        with self._client() as client:
            response = client.post(
                TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "refresh_token": self.refresh_token,
                    "grant_type": "refresh_token",
                },
            )
        if response.is_error:
            raise DriveAPIError(_error_message(response), response.status_code)
        self._access_token = response.json()["access_token"]
        return self._access_token

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._get_access_token()}"}
        headers.update(kwargs.pop("headers", {}))
        with self._client() as client:
            response = client.request(method, url, headers=headers, **kwargs)
        if response.is_error:
            raise DriveAPIError(_error_message(response), response.status_code)
        return response.json()

    def find_folders(self, name: str, parent_id: str) -> list:
        data = self._request(
            "GET",
            FILES_URL,
            params={"q": folder_query(name, parent_id), "fields": "files(id,name)"},
        )
        return data.get("files") or []

    def create_folder(self, name: str, parent_id: str) -> str:
        data = self._request(
            "POST",
            FILES_URL,
            params={"fields": "id"},
            json={"name": name, "mimeType": FOLDER_MIME, "parents": [parent_id]},
        )
        logger.info("drive_folder_created", name=name, parent_id=parent_id, folder_id=data["id"])
        return data["id"]

    def ensure_folder(self, name: str, parent_id: str) -> str:
        matches = self.find_folders(name, parent_id)
        if matches:
            return matches[0]["id"]
        return self.create_folder(name, parent_id)

    def upload_file(self, name: str, content: bytes, mime_type: str, parent_id: str) -> str:
        boundary = f"upload-drive-{uuid.uuid4().hex}"
        metadata = json.dumps({"name": name, "parents": [parent_id]})
        body = b"".join([
            f"--{boundary}\r\n".encode(),
            b"Content-Type: application/json; charset=UTF-8\r\n\r\n",
            metadata.encode("utf-8"),
            f"\r\n--{boundary}\r\n".encode(),
            f"Content-Type: {mime_type}\r\n\r\n".encode(),
            content,
            f"\r\n--{boundary}--\r\n".encode(),
        ])
        data = self._request(
            "POST",
            UPLOAD_URL,
            params={"uploadType": "multipart", "fields": "id"},
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
            content=body,
        )
        logger.info("drive_file_uploaded", name=name, parent_id=parent_id, file_id=data["id"], size=len(content))
        return data["id"]

    def view_link(self, file_id: str) -> str:
        return VIEW_LINK_TEMPLATE.format(file_id=file_id)
