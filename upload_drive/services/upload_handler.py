"""
Upload pipeline for checklist / timesheet documents.

validate -> (deposit) build ROOT/YEAR/MODULE/MONTH and upload files
         -> (checklist) send notification email -> respond

Every failure is turned into an ``UploadResult`` with ``success=False``;
links obtained before a failure are only logged, never returned.
"""
from typing import Callable, Dict, Optional

import structlog
from pydantic import ValidationError

from ..errors import InvalidRequestError
from ..schemas.upload import UploadRequest, UploadResult
from ..storage.provider import StorageProvider
from .folders import StoragePath, resolve_storage_path, root_for
from .mailer import MailAttachment, MailTransport, OutgoingMail
from .payloads import PDF_MIME, XLSX_MIME, bytes_from_base64


logger = structlog.get_logger(__name__)

TEST_MODE_NOTICE = "Modalità TEST / SCUOLA (nessun deposito su Drive)"


def ensure_path(storage: StorageProvider, path: StoragePath) -> str:
    """Return the id of the month folder, creating missing levels."""
    year_id = storage.ensure_folder(path.year, path.root_id)
    module_id = storage.ensure_folder(path.module, year_id)
    return storage.ensure_folder(path.month, module_id)


def compose_body(req: UploadRequest, links: Dict[str, Optional[str]]) -> str:
    text = (
        f"Documento: {req.modulo}\n"
        f"Società: {req.societa}\n"
        f"Data: {req.data_servizio}\n"
    )
    if req.deposit:
        if links.get("pdf"):
            text += f"\nPDF su Drive: {links['pdf']}"
        if links.get("excel"):
            text += f"\nExcel su Drive: {links['excel']}"
    else:
        text += f"\n{TEST_MODE_NOTICE}"
    return text


class UploadHandler:
    def __init__(
        self,
        storage_factory: Callable[[], StorageProvider],
        mailer_factory: Callable[[], MailTransport],
    ) -> None:
        self.storage_factory = storage_factory
        self.mailer_factory = mailer_factory

    def handle_body(self, body: Optional[bytes]) -> UploadResult:
        try:
            if not body or not body.strip():
                raise InvalidRequestError("Body mancante")
            req = UploadRequest.model_validate_json(body)
        except (InvalidRequestError, ValidationError) as e:
            logger.warning("upload_request_rejected", error=str(e))
            return UploadResult.failure(str(e))
        return self.handle(req)

    def handle(self, req: UploadRequest) -> UploadResult:
        links: Dict[str, Optional[str]] = {"pdf": None, "excel": None}
        try:
            self._validate(req)
            logger.info(
                "upload_request_received",
                societa=req.societa, modulo=req.modulo, tipo=req.tipo,
                data_servizio=req.data_servizio, deposito_drive=req.deposit,
            )
            decoded: Dict[str, bytes] = {}
            if req.deposit:
                self._deposit(req, links, decoded)
            if req.is_checklist:
                self._notify(req, links, decoded)
        except Exception as e:
            logger.error("upload_failed", error=str(e), error_type=type(e).__name__,
                         societa=req.societa, modulo=req.modulo,
                         pdf_link=links["pdf"], excel_link=links["excel"])
            return UploadResult.failure(str(e))
        return UploadResult.ok(definitivo=req.deposit, pdf_link=links["pdf"], excel_link=links["excel"])

    def _validate(self, req: UploadRequest) -> None:
        if not req.societa or not req.modulo or not req.tipo or not req.data_servizio:
            raise InvalidRequestError("Parametri obbligatori mancanti")
        root_for(req.societa)

    def _deposit(self, req: UploadRequest, links: Dict[str, Optional[str]], decoded: Dict[str, bytes]) -> None:
        path = resolve_storage_path(req.societa, req.modulo, req.data_servizio)
        storage = self.storage_factory()
        parent_id = ensure_path(storage, path)

        if req.pdf:
            decoded["pdf"] = bytes_from_base64(req.pdf.data, "pdf")
            file_id = storage.upload_file(req.pdf.name, decoded["pdf"], PDF_MIME, parent_id)
            links["pdf"] = storage.view_link(file_id)

        if req.is_timesheet and req.excel:
            content = bytes_from_base64(req.excel.data, "excel")
            file_id = storage.upload_file(req.excel.name, content, XLSX_MIME, parent_id)
            links["excel"] = storage.view_link(file_id)

    def _notify(self, req: UploadRequest, links: Dict[str, Optional[str]], decoded: Dict[str, bytes]) -> None:
        mailer = self.mailer_factory()
        attachments = []
        if req.pdf:
            content = decoded["pdf"] if "pdf" in decoded else bytes_from_base64(req.pdf.data, "pdf")
            attachments.append(MailAttachment(filename=req.pdf.name, content=content, content_type=PDF_MIME))

        recipients = req.email
        mailer.send_mail(OutgoingMail(
            to=recipients.to if recipients else [],
            cc=recipients.cc if recipients else [],
            subject=f"{req.modulo} – {req.societa}",
            text=compose_body(req, links),
            attachments=attachments,
        ))
