from fastapi import Depends
from sqlalchemy.orm import Session

from habitlog import crud
from habitlog.models.user import User
from habitlog.db import get_db


def get_current_user(db: Session = Depends(get_db)) -> User:
    """Single-user app: every request acts as the demo user."""
    return crud.get_or_create_demo_user(db)
