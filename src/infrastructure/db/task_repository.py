"""
Task & Notification Repositories.
"""

import logging

from sqlalchemy import desc
from sqlalchemy.orm import sessionmaker

from src.core.entities.task import Notification, Task, TaskStatus
from src.core.exceptions import ValidationError
from src.core.interfaces.task_store import INotificationStore, ITaskStore
from src.infrastructure.db.database import get_db, get_session_factory, store_errors
from src.infrastructure.db.models import NotificationRecord, TaskRecord, UserRecord, to_columns, utcnow
from src.infrastructure.db.repository import fetch_or_raise, load_user_refs

logger = logging.getLogger(__name__)


def ensure_assignee(db, user_id: str | None) -> None:
    if user_id and db.get(UserRecord, user_id) is None:
        raise ValidationError("assigned_to", f"unknown user: {user_id}")


class TaskRepository(ITaskStore):

    def __init__(self, session_factory: sessionmaker = None):
        self._factory = session_factory or get_session_factory()

    def list_tasks(self) -> list[Task]:
        with store_errors("list_tasks", "tasks"), get_db(self._factory) as db:
            records = db.query(TaskRecord).order_by(desc(TaskRecord.created_at)).all()
            # One users query for every assignee/creator
            users = load_user_refs(
                db, [t.assigned_to for t in records] + [t.created_by for t in records]
            )
            return [t.to_entity(users) for t in records]

    def get_task(self, task_id: str) -> Task:
        with store_errors("get_task", "tasks"), get_db(self._factory) as db:
            record = fetch_or_raise(db, TaskRecord, task_id, "task")
            return record.to_entity(load_user_refs(db, [record.assigned_to, record.created_by]))

    def insert_task(self, fields: dict, created_by: str) -> Task:
        with store_errors("insert_task", "tasks"), get_db(self._factory) as db:
            ensure_assignee(db, fields.get("assigned_to"))
            record = TaskRecord(created_by=created_by, **to_columns(TaskRecord, fields))
            db.add(record)
            db.flush()
            return record.to_entity(load_user_refs(db, [record.assigned_to, created_by]))

    def update_task(self, task_id: str, changes: dict) -> Task:
        with store_errors("update_task", "tasks"), get_db(self._factory) as db:
            record = fetch_or_raise(db, TaskRecord, task_id, "task")
            ensure_assignee(db, changes.get("assigned_to"))
            for column, value in to_columns(TaskRecord, changes).items():
                setattr(record, column, value)
            record.updated_at = utcnow()
            db.flush()
            return record.to_entity(load_user_refs(db, [record.assigned_to, record.created_by]))

    def delete_task(self, task_id: str) -> None:
        with store_errors("delete_task", "tasks"), get_db(self._factory) as db:
            record = fetch_or_raise(db, TaskRecord, task_id, "task")
            db.query(NotificationRecord).filter_by(task_id=task_id).delete(synchronize_session=False)
            db.delete(record)

    def delete_tasks_with_status(self, status: TaskStatus) -> int:
        with store_errors("delete_tasks_with_status", "tasks"), get_db(self._factory) as db:
            ids = [row.id for row in db.query(TaskRecord.id).filter_by(status=status.value)]
            if not ids:
                return 0
            db.query(NotificationRecord).filter(NotificationRecord.task_id.in_(ids)).delete(
                synchronize_session=False
            )
            return db.query(TaskRecord).filter(TaskRecord.id.in_(ids)).delete(synchronize_session=False)


class NotificationRepository(INotificationStore):

    def __init__(self, session_factory: sessionmaker = None):
        self._factory = session_factory or get_session_factory()

    def list_for_user(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        with store_errors("list_notifications", "notifications"), get_db(self._factory) as db:
            query = (
                db.query(NotificationRecord, TaskRecord)
                .outerjoin(TaskRecord, NotificationRecord.task_id == TaskRecord.id)
                .filter(NotificationRecord.user_id == user_id)
            )
            if unread_only:
                query = query.filter(NotificationRecord.read.is_(False))
            rows = query.order_by(desc(NotificationRecord.created_at)).all()
            return [notification.to_entity(task) for notification, task in rows]

    def get_notification(self, notification_id: str) -> Notification:
        with store_errors("get_notification", "notifications"), get_db(self._factory) as db:
            record = fetch_or_raise(db, NotificationRecord, notification_id, "notification")
            task = db.get(TaskRecord, record.task_id) if record.task_id else None
            return record.to_entity(task)

    def insert_notification(self, user_id: str, task_id: str | None, title: str, message: str) -> Notification:
        with store_errors("insert_notification", "notifications"), get_db(self._factory) as db:
            record = NotificationRecord(
                user_id=user_id, task_id=task_id, title=title, message=message, read=False
            )
            db.add(record)
            db.flush()
            task = db.get(TaskRecord, task_id) if task_id else None
            return record.to_entity(task)

    def set_read(self, notification_id: str, read: bool = True) -> Notification:
        with store_errors("mark_notification_read", "notifications"), get_db(self._factory) as db:
            record = fetch_or_raise(db, NotificationRecord, notification_id, "notification")
            record.read = read
            db.flush()
            task = db.get(TaskRecord, record.task_id) if record.task_id else None
            return record.to_entity(task)

    def mark_all_read(self, user_id: str) -> int:
        with store_errors("mark_all_read", "notifications"), get_db(self._factory) as db:
            return (
                db.query(NotificationRecord)
                .filter(NotificationRecord.user_id == user_id, NotificationRecord.read.is_(False))
                .update({NotificationRecord.read: True}, synchronize_session=False)
            )

    def delete_notification(self, notification_id: str) -> None:
        with store_errors("delete_notification", "notifications"), get_db(self._factory) as db:
            db.delete(fetch_or_raise(db, NotificationRecord, notification_id, "notification"))
