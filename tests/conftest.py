import base64

import pytest

from upload_drive.services.mailer import MailTransport
from upload_drive.services.upload_handler import UploadHandler
from upload_drive.storage.provider import StorageProvider


class FakeStorage(StorageProvider):
    """In-memory folder tree that records every call."""

    def __init__(self):
        self.folders = {}  # (name, parent_id) -> [ids]
        self.files = {}  # id -> (name, content, mime_type, parent_id)
        self.calls = []
        self._next = 0

    def _new_id(self, prefix):
        self._next += 1
        return f"{prefix}{self._next}"

    def ensure_folder(self, name, parent_id):
        self.calls.append(("ensure_folder", name, parent_id))
        matches = self.folders.get((name, parent_id))
        if matches:
            return matches[0]
        folder_id = self._new_id("folder")
        self.calls.append(("create_folder", name, parent_id))
        self.folders[(name, parent_id)] = [folder_id]
        return folder_id

    def upload_file(self, name, content, mime_type, parent_id):
        file_id = self._new_id("file")
        self.calls.append(("upload_file", name, mime_type, parent_id))
        self.files[file_id] = (name, content, mime_type, parent_id)
        return file_id

    def view_link(self, file_id):
        return f"https://drive.google.com/file/d/{file_id}/view"


class FakeMailer(MailTransport):
    def __init__(self):
        self.sent = []

    def send_mail(self, mail):
        self.sent.append(mail)


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def factory_calls():
    return []


@pytest.fixture
def handler(storage, mailer, factory_calls):
    def storage_factory():
        factory_calls.append("storage")
        return storage

    def mailer_factory():
        factory_calls.append("mailer")
        return mailer

    return UploadHandler(storage_factory=storage_factory, mailer_factory=mailer_factory)


@pytest.fixture
def pdf_bytes():
    return b"%PDF-1.4\n\x00\x01\xff binary body\n%%EOF"


@pytest.fixture
def xlsx_bytes():
    return b"PK\x03\x04 fake spreadsheet \x00\xfe"
