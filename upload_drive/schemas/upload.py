from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class RequestType(str, Enum):
    CHECKLIST = "CHECKLIST"
    TIMESHEET = "TS"


class FilePayload(BaseModel):
    name: str
    data: Optional[str] = None


class EmailRecipients(BaseModel):
    to: List[str] = Field(default_factory=list)
    cc: List[str] = Field(default_factory=list)


class UploadRequest(BaseModel):
    """Body of ``POST /upload-drive``.

    Mandatory fields are optional here so that a missing one is reported by
    the handler with its own message instead of a schema error.
    """

    model_config = ConfigDict(extra="ignore")

    societa: Optional[str] = None
    modulo: Optional[str] = None
    tipo: Optional[str] = None
    data_servizio: Optional[str] = None
    deposito_drive: Optional[StrictBool] = None
    email: Optional[EmailRecipients] = None
    pdf: Optional[FilePayload] = None
    excel: Optional[FilePayload] = None

    @property
    def deposit(self) -> bool:
        return self.deposito_drive is True

    @property
    def is_checklist(self) -> bool:
        return self.tipo == RequestType.CHECKLIST.value

    @property
    def is_timesheet(self) -> bool:
        return self.tipo == RequestType.TIMESHEET.value


class UploadResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    definitivo: Optional[bool] = None
    pdf_link: Optional[str] = Field(default=None, alias="pdfLink")
    excel_link: Optional[str] = Field(default=None, alias="excelLink")
    error: Optional[str] = None

    @classmethod
    def ok(cls, definitivo: bool, pdf_link: Optional[str], excel_link: Optional[str]) -> "UploadResult":
        return cls(success=True, definitivo=definitivo, pdf_link=pdf_link, excel_link=excel_link)

    @classmethod
    def failure(cls, message: str) -> "UploadResult":
        return cls(success=False, error=message)

    @property
    def status_code(self) -> int:
        return 200 if self.success else 500

    def to_response(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "definitivo": self.definitivo,
            "pdfLink": self.pdf_link,
            "excelLink": self.excel_link,
        }
