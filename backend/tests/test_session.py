from decimal import Decimal

import httpx
import pytest

from messmeal.errors import (
    MealTimeLockedError,
    SubmissionError,
    SubmissionInProgressError,
    UnknownItemError,
)
from messmeal.services.budget.calculator import PricingRule
from messmeal.services.selection.meal_times import MealTimes
from messmeal.services.selection.session import SelectionSession, SessionState
from messmeal.services.submission.client import DEFAULT_FAILURE_MESSAGE


class RecordingClient:
    def __init__(self, error=None):
        self.error = error
        self.payloads = []

    def submit(self, payload, session_cookie=None):
        self.payloads.append((payload, session_cookie))
        if self.error:
            raise SubmissionError(self.error)
        return {"ok": True}


@pytest.fixture(name="selection")
def selection_fixture(catalog):
    return SelectionSession(catalog, user_id="user-1")


def test_first_edit_moves_to_editing(selection):
    assert selection.state is SessionState.IDLE
    selection.toggle_item(7)
    assert selection.state is SessionState.EDITING


def test_unknown_item_raises(selection):
    with pytest.raises(UnknownItemError):
        selection.toggle_item(4242)


def test_locked_meal_times_cannot_change(selection):
    selection.toggle_item(3)
    with pytest.raises(MealTimeLockedError):
        selection.set_meal_time(3, "morning", False)


def test_negative_budget_is_reported_and_not_applied(selection):
    selection.set_budget(Decimal("50"), 10)
    result = selection.set_budget(Decimal("-5"), 10)
    assert result.errors == ["Budget per student cannot be negative"]
    assert selection.budget.budget_per_student == Decimal("50")


def test_empty_mess_days_are_rejected(selection):
    result = selection.set_mess_days(MealTimes())
    assert not result.is_valid
    assert selection.mess_days == MealTimes.all_on()


def test_apply_preferences_does_not_count_as_an_edit(selection):
    selection.apply_preferences(budget=None, mess_days=MealTimes(morning=True))
    assert selection.mess_days == MealTimes(morning=True)
    assert selection.state is SessionState.IDLE


def test_save_rejects_invalid_selection_without_calling_client(selection):
    client = RecordingClient()
    result = selection.save(client)
    assert not result.ok
    assert result.errors == ["Please select at least one food item"]
    assert client.payloads == []
    assert selection.state is SessionState.IDLE


def test_save_sends_payload_and_returns_to_idle(selection):
    selection.set_budget(Decimal("50"), 10)
    selection.toggle_item(7)
    selection.toggle_item(17)
    selection.set_meal_time(17, "night", False)
    selection.set_note("less salt")
    client = RecordingClient()

    result = selection.save(client, session_cookie="abc")

    assert result.ok
    payload, cookie = client.payloads[0]
    assert cookie == "abc"
    assert payload["selections"]["17"] == {"morning": True, "afternoon": True, "night": False}
    assert payload["summary"] == {"totalItems": 2, "totalPrice": 80.0, "selectedItemIds": [7, 17]}
    assert payload["budgetInfo"]["totalBudget"] == 500.0
    assert payload["budgetInfo"]["remainingBudget"] == 420.0
    assert payload["budgetInfo"]["budgetStatus"] == "normal"
    assert payload["messSettings"]["activeMealTimes"] == MealTimes.all_on().as_dict()
    assert payload["metadata"]["userId"] == "user-1"
    assert payload["metadata"]["note"] == "less salt"
    assert selection.state is SessionState.IDLE
    assert not selection.store.has_changes
    assert selection.last_saved_at is not None


def test_failed_save_keeps_selections_and_can_retry(selection):
    selection.toggle_item(7)
    failing = RecordingClient(error="Server is down")

    result = selection.save(failing)

    assert not result.ok
    assert result.errors == ["Server is down"]
    assert selection.state is SessionState.ERROR
    assert selection.error == "Server is down"
    assert selection.store.selected_item_ids == {7}

    assert selection.save(RecordingClient()).ok
    assert selection.state is SessionState.IDLE
    assert selection.error is None


def test_only_one_save_in_flight(selection):
    selection.toggle_item(7)
    selection.begin_save()
    assert selection.state is SessionState.SUBMITTING
    with pytest.raises(SubmissionInProgressError):
        selection.begin_save()


def test_stale_token_is_ignored(selection):
    selection.toggle_item(7)
    token, payload = selection.begin_save()
    assert selection.finish_save(token + 1, payload) is False
    assert selection.state is SessionState.SUBMITTING
    assert selection.finish_save(token, payload) is True
    assert selection.finish_save(token, payload) is False


def test_edits_during_submit_stay_unsaved(selection):
    selection.toggle_item(7)
    token, payload = selection.begin_save()
    selection.toggle_item(17)
    assert selection.state is SessionState.SUBMITTING

    selection.finish_save(token, payload)

    assert selection.state is SessionState.EDITING
    assert selection.store.has_changes
    selection.cancel()
    assert selection.store.selected_item_ids == {7}


def test_per_meal_pricing_in_payload(catalog):
    selection = SelectionSession(catalog, user_id="user-1", pricing_rule=PricingRule.PER_MEAL)
    selection.toggle_item(7)
    payload = selection.build_payload()
    assert payload["summary"]["totalPrice"] == 150.0
    assert payload["budgetInfo"]["pricingRule"] == "per_meal"


class BrokenClient:
    def submit(self, payload, session_cookie=None):
        raise httpx.StreamError("stream consumed")


def test_unexpected_save_failure_releases_the_session(selection):
    selection.toggle_item(7)

    result = selection.save(BrokenClient())

    assert not result.ok
    assert result.errors == [DEFAULT_FAILURE_MESSAGE]
    assert selection.state is SessionState.ERROR
    assert selection.store.selected_item_ids == {7}
    assert selection.save(RecordingClient()).ok
    assert selection.state is SessionState.IDLE
