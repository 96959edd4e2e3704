from fastapi import Depends
from sqlalchemy.orm import Session
from kb.db.session import get_db
from kb.services.record_store import RecordStore

def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)
