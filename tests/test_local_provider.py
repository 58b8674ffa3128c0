import pytest

from upload_drive.services.folders import StoragePath
from upload_drive.services.upload_handler import ensure_path
from upload_drive.storage.local_provider import LocalStorageProvider


def test_builds_tree_and_writes_file(tmp_path):
    storage = LocalStorageProvider(str(tmp_path))
    path = StoragePath(root_id="ROOT", year="2025", module="CHECKLIST", month="02_FEBBRAIO")

    folder_id = ensure_path(storage, path)
    assert folder_id == "ROOT/2025/CHECKLIST/02_FEBBRAIO"
    assert ensure_path(storage, path) == folder_id

    file_id = storage.upload_file("doc.pdf", b"\x00pdf", "application/pdf", folder_id)
    target = tmp_path / "ROOT" / "2025" / "CHECKLIST" / "02_FEBBRAIO" / "doc.pdf"
    assert target.read_bytes() == b"\x00pdf"
    assert storage.view_link(file_id) == target.resolve().as_uri()


def test_rejects_escaping_base_dir(tmp_path):
    storage = LocalStorageProvider(str(tmp_path / "store"))
    with pytest.raises(ValueError):
        storage.ensure_folder("..", "")
    with pytest.raises(ValueError):
        storage.ensure_folder("x", "../..")


def test_file_name_cannot_traverse(tmp_path):
    storage = LocalStorageProvider(str(tmp_path))
    file_id = storage.upload_file("../../evil.pdf", b"x", "application/pdf", "ROOT")
    assert file_id == "ROOT/evil.pdf"
