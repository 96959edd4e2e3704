from fastapi import APIRouter, Depends, Response
from kb.api.common import parse_int_id
from kb.core.deps import get_record_store
from kb.schemas.payloads import UserCreate, UserUpdate
from kb.services import users as user_service
from kb.services.record_store import RecordStore

router = APIRouter()

@router.get("")
def list_users(store: RecordStore = Depends(get_record_store)):
    return [u.to_dict() for u in user_service.list_users(store)]

@router.post("", status_code=201)
def create_user(payload: UserCreate, store: RecordStore = Depends(get_record_store)):
    return user_service.create_user(store, payload.name, payload.email, payload.role).to_dict()

@router.put("/{id}")
def update_user(id: str, payload: UserUpdate, store: RecordStore = Depends(get_record_store)):
    user_id = parse_int_id(id, "Invalid user ID")
    return user_service.update_user(store, user_id, payload.model_dump(exclude_unset=True)).to_dict()

@router.delete("/{id}", status_code=204)
def delete_user(id: str, store: RecordStore = Depends(get_record_store)):
    user_service.delete_user(store, parse_int_id(id, "Invalid user ID"))
    return Response(status_code=204)
