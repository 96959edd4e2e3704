from fastapi import APIRouter, Depends, Response
from kb.api.common import parse_int_id
from kb.core.deps import get_record_store
from kb.schemas.payloads import ResourceCreate, ResourceUpdate
from kb.services import resources as resource_service
from kb.services.record_store import RecordStore

router = APIRouter()

@router.get("")
def list_resources(store: RecordStore = Depends(get_record_store)):
    return [r.to_dict() for r in resource_service.list_resources(store)]

@router.post("", status_code=201)
def create_resource(payload: ResourceCreate, store: RecordStore = Depends(get_record_store)):
    resource = resource_service.create_resource(
        store,
        payload.title,
        payload.url,
        payload.type,
        topic_id=payload.topic_id,
        description=payload.description,
    )
    return resource.to_dict()

@router.put("/{id}")
def update_resource(id: str, payload: ResourceUpdate, store: RecordStore = Depends(get_record_store)):
    resource_id = parse_int_id(id, "Invalid resource ID")
    return resource_service.update_resource(store, resource_id, payload.model_dump(exclude_unset=True)).to_dict()

@router.delete("/{id}", status_code=204)
def delete_resource(id: str, store: RecordStore = Depends(get_record_store)):
    resource_service.delete_resource(store, parse_int_id(id, "Invalid resource ID"))
    return Response(status_code=204)
