"""
Local filesystem storage provider for development.
Mirrors the Drive folder tree under a local directory instead of Google Drive.
"""
from pathlib import Path
from typing import Optional

import structlog

from ..config import settings
from .provider import StorageProvider


logger = structlog.get_logger(__name__)


class LocalStorageProvider(StorageProvider):
    """Folder and file ids are paths relative to ``base_dir``; organization
    root ids become top-level directories."""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.local_storage_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_path(self, relative_id: str) -> Path:
        path = (self.base_dir / relative_id).resolve()
        if path != self.base_dir and self.base_dir not in path.parents:
            raise ValueError(f"Percorso fuori dallo storage locale: {relative_id}")
        return path

    def _to_id(self, path: Path) -> str:
        return path.relative_to(self.base_dir).as_posix()

    def ensure_folder(self, name: str, parent_id: str) -> str:
        folder = self._get_path((Path(parent_id) / name).as_posix())
        if not folder.is_dir():
            folder.mkdir(parents=True, exist_ok=True)
            logger.info("local_folder_created", path=str(folder))
        return self._to_id(folder)

    def upload_file(self, name: str, content: bytes, mime_type: str, parent_id: str) -> str:
        parent = self._get_path(parent_id)
        parent.mkdir(parents=True, exist_ok=True)
        path = parent / Path(name).name
        path.write_bytes(content)
        logger.info("local_file_written", path=str(path), mime_type=mime_type, size=len(content))
        return self._to_id(path)

    def view_link(self, file_id: str) -> str:
        return self._get_path(file_id).as_uri()
