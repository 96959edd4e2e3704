from fastapi import APIRouter
from kb.api import graph, resources, topics, users

router = APIRouter()
router.include_router(topics.router, prefix="/topics", tags=["Topics"])
router.include_router(graph.router, tags=["TopicGraph"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(resources.router, prefix="/resources", tags=["Resources"])
