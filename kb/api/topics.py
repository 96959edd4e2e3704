from fastapi import APIRouter, Depends, Response
from kb.api.common import parse_int_id
from kb.core.deps import get_record_store
from kb.schemas.payloads import TopicCreate, TopicUpdate
from kb.services import topics as topic_service
from kb.services.record_store import RecordStore

router = APIRouter()

INVALID_TOPIC_ID = "Invalid topic ID"

@router.get("")
def list_topics(store: RecordStore = Depends(get_record_store)):
    return [t.to_dict() for t in topic_service.list_topics(store)]

@router.post("", status_code=201)
def create_topic(payload: TopicCreate, store: RecordStore = Depends(get_record_store)):
    topic = topic_service.create_topic(
        store,
        payload.name,
        payload.content,
        description=payload.description,
        parent_topic_id=payload.parent_topic_id,
    )
    return topic.to_dict()

@router.get("/{id}")
def get_topic(id: str, store: RecordStore = Depends(get_record_store)):
    return topic_service.get_topic(store, parse_int_id(id, INVALID_TOPIC_ID)).to_dict()

@router.get("/{id}/versions")
def get_topic_versions(id: str, store: RecordStore = Depends(get_record_store)):
    history = topic_service.get_topic_history(store, parse_int_id(id, INVALID_TOPIC_ID))
    return {"items": [t.to_dict() for t in history], "total": len(history)}

@router.put("/{id}")
def update_topic(id: str, payload: TopicUpdate, store: RecordStore = Depends(get_record_store)):
    topic_id = parse_int_id(id, INVALID_TOPIC_ID)
    topic = topic_service.update_topic(store, topic_id, payload.model_dump(exclude_unset=True))
    return topic.to_dict()

@router.delete("/{id}", status_code=204)
def delete_topic(id: str, store: RecordStore = Depends(get_record_store)):
    topic_service.delete_topic(store, parse_int_id(id, INVALID_TOPIC_ID))
    return Response(status_code=204)
