class StorageProvider:
    def ensure_folder(self, name: str, parent_id: str) -> str:
        raise NotImplementedError

    def upload_file(self, name: str, content: bytes, mime_type: str, parent_id: str) -> str:
        raise NotImplementedError

    def view_link(self, file_id: str) -> str:
        raise NotImplementedError
