"""Tests for the onboarding navigation state machine."""
import itertools
import json
import random
from unittest.mock import MagicMock

import pytest

from creatoraide.exceptions import PersistenceWriteError
from creatoraide.models.notification import NotificationType
from creatoraide.schemas.onboarding import OnboardingProgress
from creatoraide.services.onboarding_controller import (
    OnboardingController,
    SAVE_FAILED_WARNING,
)
from creatoraide.services.persistence import InMemoryKeyValueStore
from creatoraide.services.progress_store import ProgressStore


def _notification_types(notifier):
    return [c.args[1] for c in notifier.notify.call_args_list]


class TestCompleteStep:
    """Tests for OnboardingController.complete_step."""

    def test_awards_points_and_records_step(self, controller):
        progress = controller.complete_step("dashboard")
        assert progress.completed_step_ids == ["dashboard"]
        assert progress.total_points == 15

    def test_is_idempotent(self, controller):
        once = controller.complete_step("dashboard")
        twice = controller.complete_step("dashboard")
        assert twice.completed_step_ids == once.completed_step_ids
        assert twice.total_points == once.total_points
        assert twice.badges == once.badges

    def test_unknown_step_is_noop(self, controller, kv_store, store):
        progress = controller.complete_step("does-not-exist")
        assert progress.completed_step_ids == []
        assert progress.total_points == 0
        assert kv_store.get(store.key_for("user-1")) is None

    def test_does_not_move_current_step(self, controller):
        progress = controller.complete_step("monetization")
        assert progress.current_step_id == "welcome"

    @pytest.mark.parametrize("seed", range(5))
    def test_points_equal_sum_of_distinct_completed(self, controller, catalog, seed):
        rng = random.Random(seed)
        ids = [step.id for step in catalog] + ["bogus"]
        calls = [rng.choice(ids) for _ in range(25)]

        for step_id in calls:
            progress = controller.complete_step(step_id)

        distinct = {step_id for step_id in calls if step_id in catalog}
        assert set(progress.completed_step_ids) == distinct
        assert progress.total_points == sum(catalog.get(s).points for s in distinct)

    def test_explorer_awarded_when_crossing_100(self, controller, catalog):
        # welcome..scheduler = 90 points, community-manager pushes it to 105
        for step_id in ["welcome", "dashboard", "algorithm-assistant", "content-creation", "scheduler"]:
            progress = controller.complete_step(step_id)
            assert "explorer" not in progress.badges
        assert progress.total_points == 90

        progress = controller.complete_step("community-manager")
        assert progress.total_points == 105
        assert progress.badges.count("explorer") == 1

        progress = controller.complete_step("ai-agent")
        assert progress.badges.count("explorer") == 1

    def test_tutorial_master_after_all_but_terminal(self, controller, catalog):
        for step in list(catalog)[:-1]:
            progress = controller.complete_step(step.id)
        assert "tutorial_master" in progress.badges
        assert progress.badges == ["explorer", "tutorial_master"]

    def test_stored_unknown_steps_do_not_count_toward_badges(self, kv_store, store):
        kv_store.set(store.key_for("user-1"), json.dumps({
            "currentStepId": "welcome",
            "completedStepIds": [f"retired-{i}" for i in range(7)],
            "totalPoints": 0,
        }))
        controller = OnboardingController("user-1", store)

        progress = controller.complete_step("welcome")

        assert progress.completed_step_ids == ["welcome"]
        assert progress.badges == []

    def test_notifies_step_and_badges(self, controller, notifier):
        for step_id in ["ai-agent", "completed", "monetization"]:
            controller.complete_step(step_id)

        assert _notification_types(notifier) == [
            NotificationType.STEP_COMPLETED,
            NotificationType.STEP_COMPLETED,
            NotificationType.STEP_COMPLETED,
            NotificationType.BADGE_EARNED,
        ]
        badge_call = notifier.notify.call_args_list[-1]
        assert badge_call.args[2] == "Badge Earned: Explorer!"


class TestThreeStepScenario:
    """Catalog of three steps worth 10/20/70 points."""

    @pytest.fixture
    def small_controller(self, small_catalog):
        store = ProgressStore(InMemoryKeyValueStore(), small_catalog)
        return OnboardingController("user-1", store)

    def test_scenario(self, small_controller):
        progress = small_controller.complete_step("intro")
        assert progress.total_points == 10
        assert progress.badges == []

        # Two of three completed is total steps - 1
        progress = small_controller.complete_step("middle")
        assert progress.total_points == 30
        assert progress.badges == ["tutorial_master"]

        progress = small_controller.complete_step("completed")
        assert progress.total_points == 100
        assert progress.badges == ["tutorial_master", "explorer"]


class TestNavigation:
    """Tests for start/skip/next/prev/go_to."""

    def test_next_completes_and_advances(self, controller, router):
        progress = controller.next()
        assert progress.current_step_id == "dashboard"
        assert progress.completed_step_ids == ["welcome"]
        assert progress.total_points == 10
        assert router.last_route == "/"

    def test_next_does_not_double_award(self, controller):
        controller.complete_step("welcome")
        progress = controller.next()
        assert progress.total_points == 10
        assert progress.current_step_id == "dashboard"

    def test_next_then_prev_returns_to_original(self, controller, catalog):
        for step in list(catalog)[1:-1]:
            controller.go_to(step.id)
            controller.next()
            progress = controller.prev()
            assert progress.current_step_id == step.id

    def test_prev_at_first_step_is_noop(self, controller, kv_store, store):
        progress = controller.prev()
        assert progress.current_step_id == "welcome"
        assert kv_store.get(store.key_for("user-1")) is None

    def test_prev_routes_to_previous_step(self, controller, router):
        controller.go_to("scheduler")
        controller.prev()
        assert controller.current_step.id == "content-creation"
        assert router.last_route == "/content-creation"

    def test_next_from_terminal_finishes(self, controller, notifier):
        controller.go_to("completed")
        progress = controller.next()

        assert progress.current_step_id is None
        assert progress.enabled is True
        assert "completed" in progress.completed_step_ids
        assert controller.is_active is False
        assert NotificationType.ONBOARDING_COMPLETE in _notification_types(notifier)

    def test_walk_entire_tour(self, controller, catalog):
        for _ in range(len(catalog)):
            progress = controller.next()

        assert progress.current_step_id is None
        assert progress.total_points == catalog.total_points
        assert progress.badges == ["explorer", "tutorial_master"]

    def test_next_and_prev_noop_when_inactive(self, controller):
        controller.skip()
        assert controller.next().current_step_id is None
        assert controller.prev().current_step_id is None
        assert controller.progress.completed_step_ids == []

    def test_go_to_does_not_complete(self, controller, router):
        progress = controller.go_to("ai-agent")
        assert progress.current_step_id == "ai-agent"
        assert progress.completed_step_ids == []
        assert progress.total_points == 0
        assert router.last_route == "/ai-agent"

    def test_go_to_unknown_is_noop(self, controller):
        controller.go_to("scheduler")
        progress = controller.go_to("missing")
        assert progress.current_step_id == "scheduler"

    def test_go_to_reactivates_from_inactive(self, controller):
        controller.skip()
        progress = controller.go_to("dashboard")
        assert progress.current_step_id == "dashboard"

    def test_skip_keeps_earned_progress(self, controller, notifier):
        controller.next()
        controller.next()
        progress = controller.skip()

        assert progress.current_step_id is None
        assert progress.enabled is False
        assert progress.completed_step_ids == ["welcome", "dashboard"]
        assert progress.total_points == 25
        assert NotificationType.ONBOARDING_SKIPPED in _notification_types(notifier)

    def test_skip_when_inactive_is_noop(self, controller, notifier):
        controller.skip()
        notifier.reset_mock()

        progress = controller.skip()

        assert progress.current_step_id is None
        notifier.notify.assert_not_called()

    def test_start_resets_mid_sequence(self, controller, catalog):
        for _ in range(7):
            controller.next()
        controller.skip()
        assert controller.progress.badges

        progress = controller.start()

        assert progress.current_step_id == catalog.first.id
        assert progress.completed_step_ids == []
        assert progress.total_points == 0
        assert progress.badges == []
        assert progress.enabled is True

    def test_badges_never_shrink_without_start(self, controller):
        operations = [
            controller.next, controller.prev, controller.skip,
            lambda: controller.go_to("ai-agent"),
            lambda: controller.complete_step("completed"),
            lambda: controller.complete_step("monetization"),
        ]
        previous = []
        for operation in itertools.islice(itertools.cycle(operations), 60):
            badges = operation().badges
            assert badges[:len(previous)] == previous
            previous = badges


class TestPersistenceAndObservers:
    """Tests for saving, failed saves and observers."""

    def test_each_transition_is_persisted(self, controller, store):
        controller.next()
        loaded = store.load("user-1")
        assert loaded.current_step_id == "dashboard"
        assert loaded.last_active_at is not None

    def test_new_controller_resumes_saved_progress(self, controller, store):
        controller.next()
        controller.next()

        resumed = OnboardingController("user-1", store)
        assert resumed.current_step.id == "algorithm-assistant"
        assert resumed.progress.total_points == 25

    def test_failed_save_keeps_in_memory_state(self, catalog, notifier):
        store = MagicMock(spec=ProgressStore)
        store.catalog = catalog
        store.load.return_value = OnboardingProgress.initial(catalog)
        store.save.side_effect = PersistenceWriteError("unreachable")
        controller = OnboardingController("user-1", store, notifier=notifier)

        progress = controller.next()

        assert progress.current_step_id == "dashboard"
        assert progress.total_points == 10
        assert controller.warnings == [SAVE_FAILED_WARNING]
        assert NotificationType.PROGRESS_NOT_SAVED in _notification_types(notifier)

    def test_reset_saves_defaults(self, controller, store, router):
        controller.next()
        controller.next()
        router.requested.clear()

        progress = controller.reset()

        assert progress.current_step_id == "welcome"
        assert progress.total_points == 0
        assert store.load("user-1").completed_step_ids == []
        assert router.requested == []

    def test_failed_reset_is_a_soft_warning(self, catalog, notifier):
        store = MagicMock(spec=ProgressStore)
        store.catalog = catalog
        store.load.return_value = OnboardingProgress(
            current_step_id="dashboard", completed_step_ids=["welcome"], total_points=10,
        )
        store.default_progress.return_value = OnboardingProgress.initial(catalog)
        store.save.side_effect = PersistenceWriteError("unreachable")
        controller = OnboardingController("user-1", store, notifier=notifier)

        progress = controller.reset()

        assert progress == OnboardingProgress.initial(catalog)
        assert controller.warnings == [SAVE_FAILED_WARNING]

    def test_observers_receive_snapshots(self, controller):
        received = []
        unsubscribe = controller.subscribe(received.append)

        controller.next()
        unsubscribe()
        controller.next()

        assert len(received) == 1
        assert received[0].current_step_id == "dashboard"

    def test_observer_errors_do_not_break_transitions(self, controller):
        controller.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        assert controller.next().current_step_id == "dashboard"

    def test_notifier_errors_do_not_break_transitions(self, store):
        notifier = MagicMock()
        notifier.notify.side_effect = RuntimeError("sink down")
        controller = OnboardingController("user-1", store, notifier=notifier)

        assert controller.next().total_points == 10

    def test_returned_snapshot_is_a_copy(self, controller):
        progress = controller.next()
        progress.completed_step_ids.append("tampered")
        assert "tampered" not in controller.progress.completed_step_ids
