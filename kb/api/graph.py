from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from kb.api.common import is_truthy_flag, parse_int_id
from kb.core.deps import get_record_store
from kb.services import topics as topic_service
from kb.services.record_store import RecordStore

router = APIRouter()


@router.get("/recursive/topic/{id}")
def get_recursive_topic(id: str, store: RecordStore = Depends(get_record_store)):
    tree = topic_service.get_topic_tree(store, parse_int_id(id, "Invalid topic ID"))
    if tree is None:
        raise HTTPException(status_code=404, detail="Topic not found")
    return tree.to_dict()


@router.get("/path/{id1}/{id2}")
def get_shortest_path(
    id1: str,
    id2: str,
    expand: str | None = Query(None),
    store: RecordStore = Depends(get_record_store),
):
    start_id = parse_int_id(id1, "Invalid topic IDs")
    end_id = parse_int_id(id2, "Invalid topic IDs")

    if is_truthy_flag(expand):
        nodes = topic_service.get_expanded_path(store, start_id, end_id)
        if nodes is None:
            raise HTTPException(status_code=404, detail="No path found between the topics")
        return {"path": [t.to_dict() for t in nodes]}

    path = topic_service.get_shortest_path(store, start_id, end_id)
    if path is None:
        raise HTTPException(status_code=404, detail="No path found between the topics")
    return {"path": path}
