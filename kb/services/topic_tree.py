"""
Topic tree reconstruction from flat parent-pointer records.

Children of a node are the topics whose *current* version names it as parent.
Parent pointers are client data and may form cycles (including a topic that is
its own parent). Each branch carries the set of ids on its own root-to-node
path; reaching an id that is already on that path emits the node with
``children == LOOP`` and stops descending there. Sibling branches never share
that set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from kb.domain.records import TopicRecord
from kb.services.topic_versions import latest_by_id

LOOP = "loop"


@dataclass
class TopicTreeNode:
    record: TopicRecord
    children: Union[List["TopicTreeNode"], str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: TopicRecord) -> "TopicTreeNode":
        return cls(record=record)

    @property
    def id(self) -> int:
        return self.record.id

    @property
    def is_loop(self) -> bool:
        return self.children == LOOP

    def to_dict(self) -> Dict[str, Any]:
        payload = self.record.to_dict()
        payload["children"] = LOOP if self.is_loop else [child.to_dict() for child in self.children]
        return payload


def children_index(latest: Dict[int, TopicRecord]) -> Dict[int, List[int]]:
    """parent id -> ids whose current version points at it, ascending."""
    index: Dict[int, List[int]] = {}
    for topic_id in sorted(latest):
        parent_id = latest[topic_id].parent_topic_id
        if parent_id is not None:
            index.setdefault(parent_id, []).append(topic_id)
    return index


def build_topic_tree(records: Iterable[TopicRecord], root_id: int) -> Optional[TopicTreeNode]:
    latest = latest_by_id(records)
    root = latest.get(root_id)
    if root is None:
        return None

    index = children_index(latest)
    root_node = TopicTreeNode.from_record(root)
    # Depth is bounded by the number of distinct ids, not by the recursion limit.
    pending: List[Tuple[TopicTreeNode, FrozenSet[int]]] = [(root_node, frozenset())]
    while pending:
        node, on_path = pending.pop()
        if node.id in on_path:
            node.children = LOOP
            continue
        branch_path = on_path | {node.id}
        for child_id in index.get(node.id, ()):
            child = TopicTreeNode.from_record(latest[child_id])
            node.children.append(child)
            pending.append((child, branch_path))
    return root_node
