import base64
import binascii
from typing import Optional

from ..errors import PayloadError


PDF_MIME = "application/pdf"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def bytes_from_base64(data: Optional[str], label: str = "file") -> bytes:
    if not data:
        raise PayloadError(f"{label} base64 mancante")
    try:
        return base64.b64decode("".join(data.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise PayloadError(f"{label} base64 non valido: {e}") from e
