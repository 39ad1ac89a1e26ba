from __future__ import annotations

from fastapi import APIRouter

from pgcdt.repositories.sql_repository import ContactRepository
from pgcdt.routers.schemas import ContactPayload

router = APIRouter(prefix="/contacts", tags=["contacts"])
_contact_repo = ContactRepository()


@router.get("")
def list_contacts():
    return _contact_repo.fetch_all()


@router.post("")
def save_contacts(payload: list[ContactPayload]) -> int:
    return _contact_repo.persist([item.to_record() for item in payload])
