"""
Tests for chore definitions and extra tasks.
"""
import pytest

from chore_tracker.schemas import ChoreCreate, ChoreUpdate, ExtraTaskCreate, ExtraTaskUpdate
from chore_tracker.services.chore_service import ChoreService
from chore_tracker.exceptions import KidNotFoundException, ValidationException


class TestChores:
    """Tests for chore list management"""

    def test_create_and_list_by_list_name(self, db_session):
        service = ChoreService(db_session)
        service.create_chore(ChoreCreate(list_name="A", chore_name="Make bed"))
        service.create_chore(ChoreCreate(list_name="B", chore_name="Vacuum"))

        assert [c.chore_name for c in service.get_active_chore_list("A")] == ["Make bed"]
        assert [c.chore_name for c in service.get_active_chore_list("B")] == ["Vacuum"]

    def test_unknown_list_name(self, db_session):
        with pytest.raises(ValidationException):
            ChoreService(db_session).get_active_chore_list("C")

    def test_deactivated_chore_is_hidden_but_kept(self, db_session, chore_lists):
        service = ChoreService(db_session)
        chore = chore_lists["A"][0]

        assert service.deactivate_chore(chore.id) is True

        assert chore.id not in [c.id for c in service.get_active_chore_list("A")]
        assert service.get_chore(chore.id).active is False
        assert len(service.get_all_chores()) == 3

    def test_update_moves_chore_between_lists(self, db_session, chore_lists):
        service = ChoreService(db_session)
        chore = chore_lists["A"][0]

        service.update_chore(chore.id, ChoreUpdate(list_name="B"))

        assert chore.id in [c.id for c in service.get_active_chore_list("B")]

    def test_missing_chore(self, db_session):
        service = ChoreService(db_session)

        assert service.update_chore(99, ChoreUpdate(chore_name="x")) is None
        assert service.deactivate_chore(99) is False

    def test_kid_active_chores_follow_current_list(self, db_session, ben, chore_lists):
        chores = ChoreService(db_session).get_kid_active_chores(ben.id)

        assert [c.chore_name for c in chores] == ["Take out trash"]

    def test_kid_active_chores_unknown_kid(self, db_session):
        with pytest.raises(KidNotFoundException):
            ChoreService(db_session).get_kid_active_chores(99)


class TestExtraTasks:
    """Tests for per-kid extra tasks"""

    def test_tasks_are_scoped_to_owner(self, db_session, ava, ben, ava_extras):
        service = ChoreService(db_session)
        service.create_extra_task(ExtraTaskCreate(kid_id=ben.id, task_name="Walk the dog"))

        assert len(service.get_kid_active_extra_tasks(ava.id)) == 2
        assert [t.task_name for t in service.get_kid_active_extra_tasks(ben.id)] == ["Walk the dog"]
        assert len(service.get_all_extra_tasks()) == 3
        assert len(service.get_all_extra_tasks(kid_id=ben.id)) == 1

    def test_create_for_unknown_kid(self, db_session):
        with pytest.raises(KidNotFoundException):
            ChoreService(db_session).create_extra_task(ExtraTaskCreate(kid_id=99, task_name="Nope"))

    def test_deactivate(self, db_session, ava, ava_extras):
        service = ChoreService(db_session)

        assert service.deactivate_extra_task(ava_extras[0].id) is True

        assert [t.id for t in service.get_kid_active_extra_tasks(ava.id)] == [ava_extras[1].id]
        assert len(service.get_all_extra_tasks(kid_id=ava.id)) == 2

    def test_update_name(self, db_session, ava_extras):
        task = ChoreService(db_session).update_extra_task(
            ava_extras[0].id, ExtraTaskUpdate(task_name="Read 30 minutes")
        )

        assert task.task_name == "Read 30 minutes"
        assert task.active is True
