"""Tests for the vote toggle transitions and the edit window."""

from datetime import datetime, timedelta, timezone

import pytest

from unlocker.comments.schemas import VoteAction
from unlocker.comments.service import EDIT_WINDOW, next_vote_action, within_edit_window
from unlocker.core.errors import ServiceError


class TestNextVoteAction:
    """Tri-state toggle: none / like / dislike."""

    @pytest.mark.parametrize("requested", [1, -1])
    def test_create_from_none(self, requested: int) -> None:
        assert next_vote_action(None, requested) == (VoteAction.created, requested)

    @pytest.mark.parametrize("requested", [1, -1])
    def test_same_vote_removes(self, requested: int) -> None:
        assert next_vote_action(requested, requested) == (VoteAction.removed, 0)

    def test_opposite_vote_updates(self) -> None:
        assert next_vote_action(1, -1) == (VoteAction.updated, -1)
        assert next_vote_action(-1, 1) == (VoteAction.updated, 1)

    @pytest.mark.parametrize("bad", [0, 2, -2])
    def test_rejects_unknown_type(self, bad: int) -> None:
        with pytest.raises(ServiceError):
            next_vote_action(None, bad)


class TestEditWindow:
    """Edits allowed up to exactly 3,600,000 ms after creation."""

    created = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_window_is_one_hour(self) -> None:
        assert EDIT_WINDOW == timedelta(milliseconds=3_600_000)

    def test_allowed_at_boundary(self) -> None:
        assert within_edit_window(self.created, self.created + EDIT_WINDOW)

    def test_rejected_one_ms_after(self) -> None:
        now = self.created + EDIT_WINDOW + timedelta(milliseconds=1)
        assert not within_edit_window(self.created, now)

    def test_naive_created_at_treated_as_utc(self) -> None:
        naive = self.created.replace(tzinfo=None)
        assert within_edit_window(naive, self.created + timedelta(minutes=5))
