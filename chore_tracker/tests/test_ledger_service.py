"""
Tests for LedgerService.

Tests cover:
1. Idempotent mark / unmark
2. Point transitions (the before/after bracket)
3. Not-found and validation errors
4. Deactivation lag characterisation
5. History queries and concurrent-insert recovery
"""
import pytest
from datetime import timedelta

from chore_tracker.services.ledger_service import (
    LedgerService, KidLockRegistry, transition_delta
)
from chore_tracker.services.chore_service import ChoreService
from chore_tracker.repositories.completion_repository import CompletionRepository
from chore_tracker.models import CompletionRecord, Kid
from chore_tracker.exceptions import (
    KidNotFoundException, ChoreNotFoundException, ExtraTaskNotFoundException, ValidationException
)
from chore_tracker.tests.conftest import count_completions, create_extra_task


def points_of(db_session, kid_id):
    db_session.expire_all()
    return db_session.query(Kid).filter(Kid.id == kid_id).one().points


class TestTransitionDelta:
    """Tests for transition_delta"""

    def test_incomplete_to_complete_awards(self):
        assert transition_delta(False, True) == 1

    def test_complete_to_incomplete_removes(self):
        assert transition_delta(True, False) == -1

    @pytest.mark.parametrize("before, after", [(False, False), (True, True)])
    def test_no_transition_awards_nothing(self, before, after):
        assert transition_delta(before, after) == 0


class TestIdempotence:
    """Mark and unmark must be safe to repeat"""

    def test_mark_twice_creates_one_record(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)

        first = service.mark_complete(ava.id, "extra", ava_extras[0].id, today)
        second = service.mark_complete(ava.id, "extra", ava_extras[0].id, today)

        assert first.id == second.id
        assert count_completions(db_session, kid_id=ava.id, task_id=ava_extras[0].id) == 1

    def test_mark_twice_awards_at_most_once(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)
        for task in ava_extras:
            service.mark_complete(ava.id, "extra", task.id, today)

        service.mark_complete(ava.id, "extra", ava_extras[1].id, today)
        service.mark_complete(ava.id, "extra", ava_extras[0].id, today)

        assert points_of(db_session, ava.id) == 1

    def test_unmark_absent_is_noop(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)

        service.unmark_complete(ava.id, "extra", ava_extras[0].id, today)

        assert count_completions(db_session, kid_id=ava.id) == 0
        assert points_of(db_session, ava.id) == 0

    def test_mark_then_unmark_restores_state(self, db_session, ava, ava_extras, today):
        """Round trip returns ledger and points to their previous values"""
        service = LedgerService(db_session)
        service.mark_complete(ava.id, "extra", ava_extras[0].id, today)
        points_before = points_of(db_session, ava.id)
        records_before = count_completions(db_session, kid_id=ava.id)

        service.mark_complete(ava.id, "extra", ava_extras[1].id, today)
        service.unmark_complete(ava.id, "extra", ava_extras[1].id, today)

        assert points_of(db_session, ava.id) == points_before
        assert count_completions(db_session, kid_id=ava.id) == records_before

    def test_is_completed(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)
        assert not service.is_completed(ava.id, "extra", ava_extras[0].id, today)

        service.mark_complete(ava.id, "extra", ava_extras[0].id, today)

        assert service.is_completed(ava.id, "extra", ava_extras[0].id, today)
        assert not service.is_completed(ava.id, "extra", ava_extras[0].id, today + timedelta(days=1))


class TestPointTransitions:
    """Points move exactly once per completed extra-task day"""

    def test_ava_scenario(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)
        task1, task2 = ava_extras

        service.mark_complete(ava.id, "extra", task1.id, today)
        assert points_of(db_session, ava.id) == 0

        service.mark_complete(ava.id, "extra", task2.id, today)
        assert points_of(db_session, ava.id) == 1

        service.unmark_complete(ava.id, "extra", task1.id, today)
        assert points_of(db_session, ava.id) == 0

    def test_order_of_completion_does_not_matter(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)

        for task in reversed(ava_extras):
            service.mark_complete(ava.id, "extra", task.id, today)

        assert points_of(db_session, ava.id) == 1

    def test_each_day_awards_separately(self, db_session, ava, ava_extras, today, yesterday):
        service = LedgerService(db_session)
        for day in (yesterday, today):
            for task in ava_extras:
                service.mark_complete(ava.id, "extra", task.id, day)

        assert points_of(db_session, ava.id) == 2

    def test_chore_completion_never_awards(self, db_session, ava, chore_lists, today):
        service = LedgerService(db_session)

        for chore in chore_lists["A"]:
            service.mark_complete(ava.id, "chore", chore.id, today)

        assert points_of(db_session, ava.id) == 0

    def test_toggle_reports_state(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)
        service.toggle(ava.id, "extra", ava_extras[0].id, today)

        result = service.toggle(ava.id, "extra", ava_extras[1].id, today)

        assert result.completed is True
        assert result.points_delta == 1
        assert result.points == 1
        assert result.progress.extra_tasks_completed is True

        result = service.toggle(ava.id, "extra", ava_extras[1].id, today)

        assert result.completed is False
        assert result.points_delta == -1
        assert result.points == 0
        assert result.progress.extra_tasks_completed is False


class TestValidation:
    """Missing kids and tasks are reported, never recorded"""

    def test_unknown_kid(self, db_session, today):
        with pytest.raises(KidNotFoundException):
            LedgerService(db_session).mark_complete(999, "extra", 1, today)

    def test_unknown_chore(self, db_session, ava, today):
        with pytest.raises(ChoreNotFoundException):
            LedgerService(db_session).mark_complete(ava.id, "chore", 999, today)

    def test_extra_task_of_another_kid(self, db_session, ava, ben, ava_extras, today):
        with pytest.raises(ExtraTaskNotFoundException):
            LedgerService(db_session).mark_complete(ben.id, "extra", ava_extras[0].id, today)
        assert count_completions(db_session) == 0

    def test_unknown_task_type(self, db_session, ava, today):
        with pytest.raises(ValidationException):
            LedgerService(db_session).mark_complete(ava.id, "bonus", 1, today)

    def test_session_usable_after_error(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)
        with pytest.raises(ChoreNotFoundException):
            service.mark_complete(ava.id, "chore", 999, today)

        record = service.mark_complete(ava.id, "extra", ava_extras[0].id, today)

        assert record.id is not None


class TestDeactivationLag:
    """
    Changing the active task set never writes points by itself.
    The next extra-task toggle's bracket is what observes the change.
    """

    def test_deactivating_remaining_task_does_not_award(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)
        service.mark_complete(ava.id, "extra", ava_extras[0].id, today)

        ChoreService(db_session).deactivate_extra_task(ava_extras[1].id)

        progress = service.progress_service.compute_daily_progress(ava.id, today)
        assert progress.extra_tasks_completed is True
        assert points_of(db_session, ava.id) == 0

    def test_next_toggle_observes_lazy_completion(self, db_session, ava, ava_extras, today):
        """The day became complete without an award, so un-marking removes a point it never gave"""
        service = LedgerService(db_session)
        service.mark_complete(ava.id, "extra", ava_extras[0].id, today)
        ChoreService(db_session).deactivate_extra_task(ava_extras[1].id)

        service.unmark_complete(ava.id, "extra", ava_extras[0].id, today)

        assert points_of(db_session, ava.id) == -1

    def test_deactivating_completed_chore_keeps_points(self, db_session, ava, chore_lists, ava_extras, today):
        service = LedgerService(db_session)
        for task in ava_extras:
            service.mark_complete(ava.id, "extra", task.id, today)
        service.mark_complete(ava.id, "chore", chore_lists["A"][0].id, today)

        ChoreService(db_session).deactivate_chore(chore_lists["A"][0].id)

        assert points_of(db_session, ava.id) == 1
        assert count_completions(db_session, kid_id=ava.id, task_type="chore") == 1

    def test_adding_task_after_completion_keeps_points(self, db_session, ava, ava_extras, today):
        service = LedgerService(db_session)
        for task in ava_extras:
            service.mark_complete(ava.id, "extra", task.id, today)

        create_extra_task(db_session, ava.id, "Tidy desk")

        progress = service.progress_service.compute_daily_progress(ava.id, today)
        assert progress.extra_tasks_completed is False
        assert points_of(db_session, ava.id) == 1


class TestHistory:
    """Tests for list_completions and get_task_history"""

    def test_list_completions_for_day(self, db_session, ava, ava_extras, chore_lists, today, yesterday):
        service = LedgerService(db_session)
        service.mark_complete(ava.id, "extra", ava_extras[0].id, today)
        service.mark_complete(ava.id, "chore", chore_lists["A"][0].id, today)
        service.mark_complete(ava.id, "extra", ava_extras[1].id, yesterday)

        records = service.list_completions(ava.id, today)

        assert {(r.task_type, r.task_id) for r in records} == {
            ("extra", ava_extras[0].id),
            ("chore", chore_lists["A"][0].id),
        }

    def test_history_filters_by_kid_and_range(self, db_session, ava, ben, ava_extras, chore_lists, today):
        service = LedgerService(db_session)
        days = [today - timedelta(days=offset) for offset in range(3)]
        for day in days:
            service.mark_complete(ava.id, "extra", ava_extras[0].id, day)
        service.mark_complete(ben.id, "chore", chore_lists["B"][0].id, today)

        assert len(service.get_task_history()) == 4
        assert len(service.get_task_history(kid_id=ava.id)) == 3
        in_range = service.get_task_history(kid_id=ava.id, start_date=days[1], end_date=today)
        assert sorted(r.date for r in in_range) == sorted(days[:2])


class TestConcurrency:
    """Tests for the per-kid lock and duplicate-insert recovery"""

    def test_lock_registry_reuses_lock_per_kid(self):
        registry = KidLockRegistry()

        assert registry.lock_for(1) is registry.lock_for(1)
        assert registry.lock_for(1) is not registry.lock_for(2)

    def test_unknown_kid_registers_no_lock(self, db_session, today):
        """Toggles for ids that are not kids must not grow the lock registry"""
        registry = KidLockRegistry()
        service = LedgerService(db_session, locks=registry)

        for kid_id in range(100000, 100020):
            with pytest.raises(KidNotFoundException):
                service.toggle(kid_id, "extra", 1, today)

        assert len(registry) == 0

    def test_toggle_holds_kid_lock(self, db_session, ava, ava_extras, today):
        registry = KidLockRegistry()
        requested = []
        original = registry.lock_for

        def tracking_lock_for(kid_id):
            requested.append(kid_id)
            return original(kid_id)

        registry.lock_for = tracking_lock_for
        LedgerService(db_session, locks=registry).toggle(ava.id, "extra", ava_extras[0].id, today)

        assert requested == [ava.id]
        assert not registry.lock_for(ava.id).locked()

    def test_duplicate_insert_returns_existing_without_award(self, db_session, ava, ava_extras, today):
        """A racing writer already stored the record: no second row, no second point"""
        service = LedgerService(db_session)
        for task in ava_extras:
            service.mark_complete(ava.id, "extra", task.id, today)
        service.unmark_complete(ava.id, "extra", ava_extras[1].id, today)
        db_session.add(CompletionRecord(
            kid_id=ava.id, task_type="extra", task_id=ava_extras[1].id, date=today
        ))
        db_session.commit()

        class StaleReadRepository(CompletionRepository):
            """Misses the racing insert on the first lookup"""
            def __init__(self):
                self.calls = 0

            def get(self, db, *args):
                self.calls += 1
                if self.calls == 1:
                    return None
                return CompletionRepository.get(db, *args)

        service.completion_repo = StaleReadRepository()
        record = service.mark_complete(ava.id, "extra", ava_extras[1].id, today)

        assert record is not None
        assert count_completions(db_session, kid_id=ava.id, task_id=ava_extras[1].id) == 1
        assert points_of(db_session, ava.id) == 0
