from pydantic import BaseModel
from typing import Optional


class TopicCreate(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = None
    description: Optional[str] = ""
    parent_topic_id: Optional[int] = None


class TopicUpdate(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = None
    description: Optional[str] = None
    parent_topic_id: Optional[int] = None


class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class ResourceCreate(BaseModel):
    title: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    topic_id: Optional[int] = None
    description: Optional[str] = ""


class ResourceUpdate(BaseModel):
    title: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    topic_id: Optional[int] = None
    description: Optional[str] = None
