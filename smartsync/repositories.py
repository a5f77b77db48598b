"""Repositories over the request-scoped SQLAlchemy session.

Handlers never touch ``Session`` directly; they receive one of these through
``Depends`` so every task query carries its owner's id.
"""
import logging
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smartsync.database import get_db
from smartsync.errors import ConflictError
from smartsync.models.task import Task
from smartsync.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def add(self, user: User) -> User:
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # the unique index on email is the source of truth, even under races
            self.db.rollback()
            raise ConflictError("Email already exists")
        self.db.refresh(user)
        return user

    def set_premium(self, user_id: str) -> None:
        self.db.query(User).filter(User.id == user_id).update({User.is_premium: True})
        self.db.commit()

    def update_branding(self, user_id: str, brand_name, logo_url, primary_color, custom_domain) -> None:
        self.db.query(User).filter(User.id == user_id).update({
            User.brand_name: brand_name,
            User.logo_url: logo_url,
            User.primary_color: primary_color,
            User.custom_domain: custom_domain,
        })
        self.db.commit()


class TaskRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_for(self, user_id: str) -> List[Task]:
        # tasks without a due date go last
        return (
            self.db.query(Task)
            .filter(Task.user_id == user_id)
            .order_by(Task.due_date.is_(None), Task.due_date.asc())
            .all()
        )

    def get(self, task_id: str) -> Optional[Task]:
        return self.db.get(Task, task_id)

    def add(self, task: Task) -> Task:
        """Insert ``task``; re-adding an id the owner already has is a no-op."""
        existing = self.get(task.id)
        if existing is not None:
            if existing.user_id != task.user_id:
                raise ConflictError("Task id already in use")
            logger.debug("Task %s already stored for user %s", task.id, task.user_id)
            return existing
        self.db.add(task)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Task id already in use")
        self.db.refresh(task)
        return task

    def set_completed(self, user_id: str, task_id: str, completed: bool) -> int:
        count = (
            self.db.query(Task)
            .filter(Task.id == task_id, Task.user_id == user_id)
            .update({Task.completed: completed})
        )
        self.db.commit()
        return count

    def delete(self, user_id: str, task_id: str) -> int:
        count = (
            self.db.query(Task)
            .filter(Task.id == task_id, Task.user_id == user_id)
            .delete()
        )
        self.db.commit()
        return count


def get_users(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_tasks(db: Session = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)
