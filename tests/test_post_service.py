"""Tests for post queries: creation, root bookkeeping, listing, soft delete.

Runs the service functions directly on a Session, without the lock guard.
"""

import pytest

from threadboard.exceptions import PostNotFoundError, ValidationError
from threadboard.posts import service
from threadboard.posts.models import Post


class TestCreateRoot:
    """Root posts have no root_id or parent_id."""

    def test_create_root(self, db_session):
        post = service.create_root(db_session, "alice", "First post")

        assert post.id is not None
        assert post.root_id is None
        assert post.parent_id is None
        assert post.author == "alice"
        assert post.message == "First post"
        assert post.created_at is not None
        assert post.deleted_at is None
        assert post.is_root is True

    def test_create_root_then_get(self, db_session):
        created = service.create_root(db_session, "bob", "Hello there")
        db_session.expunge_all()

        fetched = service.get_post(db_session, created.id)
        assert fetched.id == created.id
        assert fetched.root_id is None
        assert fetched.parent_id is None
        assert fetched.author == "bob"
        assert fetched.message == "Hello there"

    def test_ids_increase(self, db_session):
        first = service.create_root(db_session, "alice", "one")
        second = service.create_root(db_session, "alice", "two")
        assert second.id > first.id

    @pytest.mark.parametrize(
        "author,message",
        [
            ("", "message"),
            ("   ", "message"),
            ("alice", ""),
            ("alice", " \n\t "),
        ],
    )
    def test_blank_input_rejected(self, db_session, author, message):
        with pytest.raises(ValidationError):
            service.create_root(db_session, author, message)
        assert service.count_posts(db_session) == 0

    def test_validation_error_names_field(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            service.create_root(db_session, " ", "body")
        assert "Author" in str(exc_info.value)


class TestCreateReply:
    """Reply root_id always names the thread root, at any depth."""

    def test_reply_to_root(self, db_session, sample_root):
        reply = service.create_reply(db_session, sample_root, "bob", "Feed it daily")

        assert reply.parent_id == sample_root.id
        assert reply.root_id == sample_root.id
        assert reply.is_root is False

    def test_nested_replies_keep_thread_root(self, db_session, sample_root):
        level1 = service.create_reply(db_session, sample_root, "bob", "level 1")
        level2 = service.create_reply(db_session, level1, "carol", "level 2")
        level3 = service.create_reply(db_session, level2, "dave", "level 3")
        level4 = service.create_reply(db_session, level3, "erin", "level 4")

        assert level1.root_id == sample_root.id
        assert level2.root_id == level1.root_id == sample_root.id
        assert level3.root_id == level2.root_id
        assert level4.root_id == sample_root.id

        assert level2.parent_id == level1.id
        assert level3.parent_id == level2.id
        assert level4.parent_id == level3.id

        # Every root_id points at a true root
        for reply in (level1, level2, level3, level4):
            assert service.get_post(db_session, reply.root_id).root_id is None

    def test_blank_reply_rejected(self, db_session, sample_root):
        before = service.count_posts(db_session)
        with pytest.raises(ValidationError):
            service.create_reply(db_session, sample_root, "bob", "   ")
        assert service.count_posts(db_session) == before

    def test_reply_under_deleted_parent_allowed(self, db_session, sample_root):
        service.soft_delete(db_session, sample_root.id)
        reply = service.create_reply(db_session, sample_root, "bob", "still here?")
        assert reply.root_id == sample_root.id


class TestGetPost:
    def test_missing_post(self, db_session):
        with pytest.raises(PostNotFoundError) as exc_info:
            service.get_post(db_session, 999)
        assert exc_info.value.post_id == 999
        assert "999" in str(exc_info.value)

    def test_deleted_post_still_returned(self, db_session, sample_root):
        service.soft_delete(db_session, sample_root.id)
        post = service.get_post(db_session, sample_root.id)
        assert post.is_deleted is True

    @pytest.mark.parametrize("post_id", [0, -5, 2**63])
    def test_out_of_range_id(self, db_session, post_id):
        with pytest.raises(PostNotFoundError):
            service.get_post(db_session, post_id)

    def test_held_instance_refreshed_after_delete(self, db_session, sample_root):
        service.soft_delete(db_session, sample_root.id)
        assert sample_root.deleted_at is not None
        assert service.redact(sample_root).message == service.DELETED_MESSAGE


class TestListRoots:
    def test_only_roots_newest_first(self, db_session):
        first = service.create_root(db_session, "alice", "older")
        service.create_reply(db_session, first, "bob", "a reply")
        second = service.create_root(db_session, "carol", "newer")

        roots = service.list_roots(db_session)
        assert [p.id for p in roots] == [second.id, first.id]

    def test_empty(self, db_session):
        assert service.list_roots(db_session) == []


class TestListThread:
    def test_one_query_returns_all_depths(self, db_session, sample_root):
        a = service.create_reply(db_session, sample_root, "bob", "a")
        b = service.create_reply(db_session, a, "carol", "b")
        other_root = service.create_root(db_session, "zed", "unrelated")
        service.create_reply(db_session, other_root, "zed", "unrelated reply")

        thread = service.list_thread(db_session, sample_root.id)
        assert [p.id for p in thread] == [a.id, b.id]


class TestSoftDelete:
    def test_sets_deleted_at_once(self, db_session, sample_root):
        service.soft_delete(db_session, sample_root.id)
        post = db_session.get(Post, sample_root.id)
        first_deleted_at = post.deleted_at
        assert first_deleted_at is not None

        with pytest.raises(PostNotFoundError):
            service.soft_delete(db_session, sample_root.id)
        assert db_session.get(Post, sample_root.id).deleted_at == first_deleted_at

    def test_missing_post(self, db_session):
        with pytest.raises(PostNotFoundError):
            service.soft_delete(db_session, 12345)

    def test_out_of_range_id(self, db_session):
        with pytest.raises(PostNotFoundError):
            service.soft_delete(db_session, 2**63)

    def test_row_kept(self, db_session, sample_root):
        reply = service.create_reply(db_session, sample_root, "bob", "reply")
        service.soft_delete(db_session, reply.id)

        assert service.count_posts(db_session) == 2
        kept = service.get_post(db_session, reply.id)
        assert kept.author == "bob"
        assert kept.message == "reply"
        assert kept.parent_id == sample_root.id
        assert kept.root_id == sample_root.id


class TestRedact:
    def test_live_post_unchanged(self, db_session, sample_root):
        snapshot = service.redact(sample_root)
        assert snapshot.message == sample_root.message
        assert snapshot.is_deleted is False

    def test_deleted_post_placeholder(self, db_session, sample_root):
        service.soft_delete(db_session, sample_root.id)
        snapshot = service.redact(service.get_post(db_session, sample_root.id))

        assert snapshot.message == service.DELETED_MESSAGE
        assert snapshot.author == "alice"
        assert snapshot.id == sample_root.id
        assert snapshot.deleted_at is not None
