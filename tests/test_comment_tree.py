"""Tests for the comment tree builder (flat rows -> sorted reply tree)."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from unlocker.comments.schemas import SortMode
from unlocker.comments.service import build_comment_tree, count_votes

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def _user(username: str = "alice123"):
    return SimpleNamespace(first_name="Alice", last_name="Doe", username=username)


def _vote(user_id: int, vote_type: int):
    return SimpleNamespace(user_id=user_id, vote_type=vote_type)


def _row(id: int, parent_id: int | None = None, minutes: int = 0, votes=()):
    return SimpleNamespace(
        id=id,
        video_id="vid1",
        user_id=1,
        content=f"comment {id}",
        parent_id=parent_id,
        created_at=T0 + timedelta(minutes=minutes),
        updated_at=None,
        user=_user(),
        votes=list(votes),
    )


def _ids(nodes):
    return [n["id"] for n in nodes]


class TestTreeShape:
    """Nesting and orphan handling."""

    def test_empty_input(self) -> None:
        assert build_comment_tree([]) == []

    def test_reply_nested_and_orphan_dropped(self) -> None:
        rows = [_row(1), _row(2, parent_id=1, minutes=1), _row(3, parent_id=99, minutes=2)]
        tree = build_comment_tree(rows)

        assert _ids(tree) == [1]
        assert _ids(tree[0]["replies"]) == [2]
        assert tree[0]["replies"][0]["replies"] == []

    def test_replies_of_replies_are_kept(self) -> None:
        rows = [_row(1), _row(2, parent_id=1, minutes=1), _row(3, parent_id=2, minutes=2)]
        tree = build_comment_tree(rows)

        assert _ids(tree[0]["replies"]) == [2]
        assert _ids(tree[0]["replies"][0]["replies"]) == [3]

    def test_every_linked_node_appears_once(self) -> None:
        rows = [
            _row(1),
            _row(2, minutes=1),
            _row(3, parent_id=1, minutes=2),
            _row(4, parent_id=1, minutes=3),
            _row(5, parent_id=3, minutes=4),
            _row(6, parent_id=42, minutes=5),
        ]
        tree = build_comment_tree(rows)

        seen = []

        def walk(nodes):
            for n in nodes:
                seen.append(n["id"])
                walk(n["replies"])

        walk(tree)
        assert sorted(seen) == [1, 2, 3, 4, 5]

    def test_replies_keep_creation_order(self) -> None:
        rows = [
            _row(1),
            _row(2, parent_id=1, minutes=1, votes=[_vote(7, 1)]),
            _row(3, parent_id=1, minutes=2, votes=[_vote(7, 1), _vote(8, 1)]),
        ]
        tree = build_comment_tree(rows, sort=SortMode.top)
        assert _ids(tree[0]["replies"]) == [2, 3]


class TestSorting:
    """Only the top level is ordered."""

    def test_newest_first(self) -> None:
        rows = [_row(1, minutes=0), _row(2, minutes=10), _row(3, minutes=5)]
        tree = build_comment_tree(rows, sort=SortMode.newest)
        assert _ids(tree) == [2, 3, 1]

    def test_oldest_first(self) -> None:
        rows = [_row(2, minutes=10), _row(1, minutes=0), _row(3, minutes=5)]
        tree = build_comment_tree(rows, sort=SortMode.oldest)
        assert _ids(tree) == [1, 3, 2]

    def test_top_by_likes_stable_on_ties(self) -> None:
        rows = [
            _row(1, minutes=0, votes=[_vote(10, 1)]),
            _row(2, minutes=1, votes=[_vote(10, 1), _vote(11, 1), _vote(12, -1)]),
            _row(3, minutes=2, votes=[_vote(11, 1)]),
            _row(4, minutes=3, votes=[_vote(10, -1), _vote(11, -1)]),
        ]
        tree = build_comment_tree(rows, sort=SortMode.top)

        assert _ids(tree) == [2, 1, 3, 4]
        likes = [n["likes"] for n in tree]
        assert likes == sorted(likes, reverse=True)


class TestVoteDecoration:
    """Counts and per-viewer vote state."""

    def test_counts_and_viewer_vote(self) -> None:
        rows = [_row(1, votes=[_vote(10, 1), _vote(11, 1), _vote(12, -1)])]

        node = build_comment_tree(rows, viewer_id=12)[0]
        assert (node["likes"], node["dislikes"], node["user_vote"]) == (2, 1, -1)

    def test_viewer_without_vote_or_anonymous(self) -> None:
        rows = [_row(1, votes=[_vote(10, 1)])]

        assert build_comment_tree(rows, viewer_id=99)[0]["user_vote"] == 0
        assert build_comment_tree(rows)[0]["user_vote"] == 0

    def test_author_fields(self) -> None:
        node = build_comment_tree([_row(1)])[0]
        assert node["author"] == {
            "first_name": "Alice",
            "last_name": "Doe",
            "username": "alice123",
        }

    def test_count_votes_ignores_unknown_types(self) -> None:
        assert count_votes([1, -1, 1, 0, 5]) == (2, 1)
