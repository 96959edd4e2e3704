from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional, Set, Tuple

from kb.domain.records import TopicRecord
from kb.services.topic_tree import children_index
from kb.services.topic_versions import latest_by_id


def find_shortest_path(records: Iterable[TopicRecord], start_id: int, end_id: int) -> Optional[List[int]]:
    """
    Shortest id sequence from ``start_id`` to ``end_id`` over the undirected
    parent/child graph of current topic versions, or None when unreachable.

    Breadth-first: a node's parent is enqueued before its children (ascending
    id). Nodes are marked visited when dequeued; an id that does not resolve to
    a topic is dropped on dequeue, so ``start_id == end_id`` yields
    ``[start_id]`` only for an existing topic.
    """
    latest = latest_by_id(records)
    index = children_index(latest)

    queue: Deque[Tuple[int, List[int]]] = deque([(start_id, [start_id])])
    visited: Set[int] = set()

    while queue:
        topic_id, path = queue.popleft()
        if topic_id in visited:
            continue
        topic = latest.get(topic_id)
        if topic is None:
            continue
        visited.add(topic_id)

        if topic_id == end_id:
            return path

        parent_id = topic.parent_topic_id
        if parent_id is not None and parent_id not in visited:
            queue.append((parent_id, path + [parent_id]))
        for child_id in index.get(topic_id, ()):
            if child_id not in visited:
                queue.append((child_id, path + [child_id]))

    return None
