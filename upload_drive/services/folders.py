"""
Drive folder layout: ROOT / YEAR / MODULE / MONTH.
"""
from datetime import date, datetime
from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple

from ..errors import InvalidRequestError, UnknownOrganizationError


ORGANIZATION_ROOTS: Mapping[str, str] = MappingProxyType({
    "MIS_OSIMO": "1bsPNJ2BFJIP9Q3WwDSVNy32u-Qu2qMjr",
    "MIS_MONTEGIORGIO": "1PCvF76LJwD6T_OaPtkWg6dh1Tg-DG6or",
    "MIS_GROTTAMMARE": "12Nj8o942uedxByJOtcSKXvkTBH6ShNNA",
})

MONTH_FOLDERS: Tuple[str, ...] = (
    "01_GENNAIO", "02_FEBBRAIO", "03_MARZO", "04_APRILE", "05_MAGGIO", "06_GIUGNO",
    "07_LUGLIO", "08_AGOSTO", "09_SETTEMBRE", "10_OTTOBRE", "11_NOVEMBRE", "12_DICEMBRE",
)


class StoragePath(NamedTuple):
    root_id: str
    year: str
    module: str
    month: str


def root_for(societa: str) -> str:
    root_id = ORGANIZATION_ROOTS.get(societa)
    if not root_id:
        raise UnknownOrganizationError(societa)
    return root_id


def parse_service_date(value: str) -> date:
    """Accept ``YYYY-MM-DD`` or a full ISO datetime (``Z`` suffix included)."""
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidRequestError(f"data_servizio non valida: {value}")


def month_folder(service_date: date) -> str:
    return MONTH_FOLDERS[service_date.month - 1]


def resolve_storage_path(societa: str, modulo: str, data_servizio: str) -> StoragePath:
    root_id = root_for(societa)
    service_date = parse_service_date(data_servizio)
    return StoragePath(
        root_id=root_id,
        year=f"{service_date.year:04d}",
        module=modulo,
        month=month_folder(service_date),
    )
