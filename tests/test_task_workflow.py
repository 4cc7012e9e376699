"""
Tests for tasks and assignment notifications.

Validates:
- default assignee and the assignment notification rule
- trash / archive / restore (always back to "nova")
- empty_trash count and idempotence
- unconditional status setter
- notification failures never fail the task mutation
"""

from datetime import date

import pytest

from src.core.entities.task import TaskInput, TaskStatus
from src.core.exceptions import NotAuthenticatedError, RecordNotFoundError, RemoteStoreError, ValidationError
from src.core.use_cases.notifications import ASSIGNMENT_TITLE, NotificationUseCase
from src.core.use_cases.task_workflow import TaskWorkflowUseCase
from tests.conftest import ANALYST_ID, REVIEWER_ID


def task_input(**overrides) -> TaskInput:
    values = {"title": "Review X", "due_date": "2025-06-01"}
    values.update(overrides)
    return TaskInput(**values)


# =============================================================================
# Creation & assignment
# =============================================================================


class TestCreateTask:

    def test_defaults_to_creator_without_notification(self, tasks, notifications, analyst):
        task = tasks.create_task(analyst, task_input())

        assert task.assigned_to == ANALYST_ID
        assert task.created_by == ANALYST_ID
        assert task.status == TaskStatus.NOVA
        assert task.due_date == date(2025, 6, 1)
        assert notifications.list_notifications(analyst) == []

    def test_assign_to_other_user_notifies_once(self, tasks, notifications, analyst, reviewer):
        task = tasks.create_task(analyst, task_input(assigned_to=REVIEWER_ID))

        inbox = notifications.list_notifications(reviewer)
        assert len(inbox) == 1
        assert inbox[0].task_id == task.id
        assert inbox[0].title == ASSIGNMENT_TITLE
        assert inbox[0].message == "Você recebeu uma nova tarefa: Review X"
        assert inbox[0].read is False
        assert inbox[0].task_title == "Review X"
        assert inbox[0].task_status == TaskStatus.NOVA
        assert notifications.list_notifications(analyst) == []

    def test_assign_to_self_explicitly(self, tasks, notifications, analyst):
        tasks.create_task(analyst, task_input(assigned_to=ANALYST_ID))
        assert notifications.list_notifications(analyst) == []

    def test_assignee_and_creator_profiles(self, tasks, analyst):
        task = tasks.create_task(analyst, task_input(assigned_to=REVIEWER_ID))
        listed = tasks.list_tasks()[0]
        assert listed.assignee.name == "Rui Revisor"
        assert listed.creator.name == "Ana Analista"
        assert task.assignee.id == REVIEWER_ID

    def test_requires_session(self, tasks):
        with pytest.raises(NotAuthenticatedError):
            tasks.create_task(None, task_input())

    def test_unknown_assignee_rejected(self, tasks, analyst):
        with pytest.raises(ValidationError) as exc:
            tasks.create_task(analyst, task_input(assigned_to="nobody"))
        assert exc.value.field == "assigned_to"
        assert tasks.list_tasks() == []

    @pytest.mark.parametrize("field", ["title", "due_date"])
    def test_required_fields(self, tasks, analyst, field):
        with pytest.raises(ValidationError):
            tasks.create_task(analyst, task_input(**{field: ""}))

    def test_notification_failure_does_not_fail_creation(self, task_store, analyst, caplog):
        class BrokenInbox:
            def insert_notification(self, **kwargs):
                raise RemoteStoreError("insert failed", operation="insert_notification")

        workflow = TaskWorkflowUseCase(task_store, NotificationUseCase(BrokenInbox()))
        task = workflow.create_task(analyst, task_input(assigned_to=REVIEWER_ID))

        assert task.assigned_to == REVIEWER_ID
        assert workflow.get_task(task.id).id == task.id
        assert "Could not notify" in caplog.text


class TestReassignment:

    def test_reassign_notifies_new_assignee(self, tasks, notifications, analyst, reviewer):
        task = tasks.create_task(analyst, task_input())
        tasks.update_task(analyst, task.id, {"assigned_to": REVIEWER_ID})
        assert len(notifications.list_notifications(reviewer)) == 1

    def test_same_assignee_does_not_notify_again(self, tasks, notifications, analyst, reviewer):
        task = tasks.create_task(analyst, task_input(assigned_to=REVIEWER_ID))
        tasks.update_task(analyst, task.id, {"assigned_to": REVIEWER_ID, "title": "Review Y"})
        assert len(notifications.list_notifications(reviewer)) == 1

    def test_taking_a_task_for_oneself(self, tasks, notifications, analyst, reviewer):
        task = tasks.create_task(analyst, task_input(assigned_to=REVIEWER_ID))
        tasks.update_task(reviewer, task.id, {"assigned_to": REVIEWER_ID})
        tasks.update_task(analyst, task.id, {"assigned_to": ANALYST_ID})
        assert notifications.list_notifications(analyst) == []

    def test_reassign_to_unknown_user(self, tasks, analyst):
        task = tasks.create_task(analyst, task_input())
        with pytest.raises(ValidationError) as exc:
            tasks.update_task(analyst, task.id, {"assigned_to": "nobody"})
        assert exc.value.field == "assigned_to"
        assert tasks.get_task(task.id).assigned_to == ANALYST_ID

    def test_partial_update(self, tasks, analyst):
        task = tasks.create_task(analyst, task_input(description="Primeira versão"))
        updated = tasks.update_task(analyst, task.id, {"priority": "high"})
        assert updated.priority.value == "high"
        assert updated.description == "Primeira versão"
        assert updated.title == "Review X"


# =============================================================================
# Status, trash & archive
# =============================================================================


class TestStatus:

    def test_restore_from_trash_goes_to_nova(self, tasks, analyst):
        task = tasks.create_task(analyst, task_input())
        tasks.update_status(analyst, task.id, "em_andamento")

        trashed = tasks.move_to_trash(analyst, task.id)
        assert trashed.status == TaskStatus.LIXEIRA

        restored = tasks.restore_from_trash(analyst, task.id)
        assert restored.status == TaskStatus.NOVA

    def test_restore_from_archive_goes_to_nova(self, tasks, analyst):
        task = tasks.create_task(analyst, task_input())
        tasks.update_status(analyst, task.id, "concluida")
        assert tasks.archive_task(analyst, task.id).status == TaskStatus.ARQUIVADA
        assert tasks.restore_from_archive(analyst, task.id).status == TaskStatus.NOVA

    def test_any_transition_is_accepted(self, tasks, analyst):
        task = tasks.create_task(analyst, task_input())
        assert tasks.update_status(analyst, task.id, "arquivada").status == TaskStatus.ARQUIVADA
        assert tasks.update_status(analyst, task.id, "concluida").status == TaskStatus.CONCLUIDA
        assert tasks.update_status(analyst, task.id, "nova").status == TaskStatus.NOVA

    def test_rejects_unknown_status(self, tasks, analyst):
        task = tasks.create_task(analyst, task_input())
        with pytest.raises(ValidationError):
            tasks.update_status(analyst, task.id, "trash")

    def test_each_task_in_exactly_one_bucket(self, tasks, analyst):
        ids = [tasks.create_task(analyst, task_input(title=f"T{i}")).id for i in range(5)]
        for task_id, status in zip(ids, TaskStatus):
            tasks.update_status(analyst, task_id, status)

        buckets = tasks.buckets()
        assert set(buckets) == {s.value for s in TaskStatus}
        for status in TaskStatus:
            assert len(buckets[status.value]) == 1
        seen = [t.id for items in buckets.values() for t in items]
        assert sorted(seen) == sorted(ids)

    def test_my_tasks(self, tasks, analyst, reviewer):
        mine = tasks.create_task(analyst, task_input(title="Mine"))
        tasks.create_task(analyst, task_input(title="Theirs", assigned_to=REVIEWER_ID))
        assert [t.id for t in tasks.my_tasks(analyst)] == [mine.id]


class TestEmptyTrash:

    def test_removes_only_trashed_and_is_idempotent(self, tasks, analyst):
        keep = tasks.create_task(analyst, task_input(title="Keep"))
        for title in ("A", "B"):
            tasks.move_to_trash(analyst, tasks.create_task(analyst, task_input(title=title)).id)

        assert tasks.empty_trash(analyst) == 2
        assert tasks.buckets()["lixeira"] == []
        assert tasks.empty_trash(analyst) == 0
        assert [t.id for t in tasks.list_tasks()] == [keep.id]

    def test_removes_notifications_of_deleted_tasks(self, tasks, notifications, analyst, reviewer):
        task = tasks.create_task(analyst, task_input(assigned_to=REVIEWER_ID))
        tasks.move_to_trash(analyst, task.id)
        tasks.empty_trash(analyst)
        assert notifications.list_notifications(reviewer) == []

    def test_requires_session(self, tasks):
        with pytest.raises(NotAuthenticatedError):
            tasks.empty_trash(None)


class TestDeletePermanently:

    def test_delete(self, tasks, analyst):
        task = tasks.create_task(analyst, task_input())
        tasks.delete_permanently(analyst, task.id)
        with pytest.raises(RecordNotFoundError):
            tasks.get_task(task.id)

    def test_delete_unknown(self, tasks, analyst):
        with pytest.raises(RecordNotFoundError):
            tasks.delete_permanently(analyst, "missing")
