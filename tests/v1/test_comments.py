# tests/v1/test_comments.py
"""Tests for comment endpoints and the post comment counter."""

from datetime import UTC, datetime

import pytest
from fastapi import status

from guildhall.db.time import ensure_utc
from guildhall.models import Comment, Notification, Post

COMMENTS = "/api/v1/comments"


def _comment_count(db_session, post_id: int) -> int:
    db_session.expire_all()
    return db_session.get(Post, post_id).comment_count


def test_create_comment_increments_count(client, db_session, test_post, other_auth_token):
    response = client.post(
        COMMENTS,
        json={"post_id": test_post.id, "content": "  Great guide  "},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]
    assert data["content"] == "Great guide"
    assert data["parent_comment_id"] is None
    assert _comment_count(db_session, test_post.id) == 1


def test_comment_notifies_post_author(client, db_session, test_post, test_user, other_auth_token):
    client.post(COMMENTS, json={"post_id": test_post.id, "content": "Hi"}, headers=other_auth_token)
    notes = db_session.query(Notification).filter_by(user_id=test_user.id).all()
    assert len(notes) == 1
    assert notes[0].type == "comment"
    assert notes[0].link == f"/posts/{test_post.id}"


def test_own_comment_does_not_notify(client, db_session, test_post, auth_token):
    client.post(COMMENTS, json={"post_id": test_post.id, "content": "Bump"}, headers=auth_token)
    assert db_session.query(Notification).count() == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"content": "No post"},
        {"post_id": 1, "content": "   "},
        {"post_id": 1, "content": "x" * 5_001},
    ],
)
def test_create_comment_validation(client, auth_token, payload):
    response = client.post(COMMENTS, json=payload, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_comment_requires_auth(client, test_post):
    response = client.post(COMMENTS, json={"post_id": test_post.id, "content": "Hi"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_comment_on_missing_post(client, auth_token):
    response = client.post(COMMENTS, json={"post_id": 9999, "content": "Hi"}, headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_comment_on_deleted_post(client, make_post, test_user, auth_token):
    post = make_post(test_user, is_deleted=True)
    response = client.post(COMMENTS, json={"post_id": post.id, "content": "Hi"}, headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_reply_with_missing_parent(client, test_post, auth_token):
    response = client.post(
        COMMENTS,
        json={"post_id": test_post.id, "content": "Reply", "parent_comment_id": 9999},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_reply_with_parent_from_other_post(
    client, db_session, make_post, make_comment, test_user, test_post, auth_token
):
    elsewhere = make_post(test_user, title="Elsewhere")
    parent = make_comment(elsewhere, test_user)
    response = client.post(
        COMMENTS,
        json={"post_id": test_post.id, "content": "Reply", "parent_comment_id": parent.id},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert _comment_count(db_session, test_post.id) == 0


def test_reply_to_comment(client, test_comment, test_post, auth_token):
    response = client.post(
        COMMENTS,
        json={"post_id": test_post.id, "content": "Thanks", "parent_comment_id": test_comment.id},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["data"]["parent_comment_id"] == test_comment.id


def test_list_comments_oldest_first(client, make_comment, test_post, test_user, other_user):
    first = make_comment(test_post, test_user, "First")
    second = make_comment(test_post, other_user, "Second")
    make_comment(test_post, other_user, "Hidden", is_deleted=True)

    data = client.get(COMMENTS, params={"post_id": test_post.id}).json()["data"]
    assert [c["id"] for c in data["comments"]] == [first.id, second.id]
    assert data["pagination"]["total_items"] == 2


def test_list_comments_requires_post_id(client):
    response = client.get(COMMENTS)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_list_comments_for_missing_post(client):
    assert client.get(COMMENTS, params={"post_id": 9999}).status_code == status.HTTP_404_NOT_FOUND


def test_get_comment(client, test_comment):
    response = client.get(f"{COMMENTS}/{test_comment.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["author"]["username"] == "bob"


def test_update_comment_by_owner(client, test_comment, other_auth_token):
    response = client.put(
        f"{COMMENTS}/{test_comment.id}", json={"content": "Edited"}, headers=other_auth_token
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["content"] == "Edited"


def test_update_comment_by_post_author_is_forbidden(client, test_comment, auth_token):
    response = client.put(
        f"{COMMENTS}/{test_comment.id}", json={"content": "Edited"}, headers=auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_delete_comment_decrements_count(client, db_session, test_comment, test_post, other_auth_token):
    assert _comment_count(db_session, test_post.id) == 1
    response = client.delete(f"{COMMENTS}/{test_comment.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert _comment_count(db_session, test_post.id) == 0

    stored = db_session.get(Comment, test_comment.id)
    assert stored.is_deleted is True
    assert client.get(f"{COMMENTS}/{test_comment.id}").status_code == status.HTTP_404_NOT_FOUND


def test_delete_comment_count_is_floored(client, db_session, test_comment, test_post, other_auth_token):
    test_post.comment_count = 0
    db_session.commit()
    client.delete(f"{COMMENTS}/{test_comment.id}", headers=other_auth_token)
    assert _comment_count(db_session, test_post.id) == 0


def test_delete_comment_by_admin(client, test_comment, admin_token):
    response = client.delete(f"{COMMENTS}/{test_comment.id}", headers=admin_token)
    assert response.status_code == status.HTTP_200_OK


def test_delete_comment_by_stranger_is_forbidden(client, test_comment, auth_token):
    response = client.delete(f"{COMMENTS}/{test_comment.id}", headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_replies_survive_parent_deletion(
    client, make_comment, test_comment, test_post, test_user, other_auth_token
):
    reply = make_comment(test_post, test_user, "Reply", parent_comment_id=test_comment.id)
    client.delete(f"{COMMENTS}/{test_comment.id}", headers=other_auth_token)

    data = client.get(COMMENTS, params={"post_id": test_post.id}).json()["data"]
    assert [c["id"] for c in data["comments"]] == [reply.id]
    assert data["comments"][0]["parent_comment_id"] == test_comment.id


def test_comment_count_changes_keep_post_updated_at(
    client, db_session, make_post, test_user, other_auth_token
):
    last_edit = datetime(2024, 1, 1, tzinfo=UTC)
    post = make_post(test_user, updated_at=last_edit)

    created = client.post(
        COMMENTS, json={"post_id": post.id, "content": "First!"}, headers=other_auth_token
    )
    assert created.status_code == status.HTTP_201_CREATED
    comment_id = created.json()["data"]["id"]
    client.delete(f"{COMMENTS}/{comment_id}", headers=other_auth_token)

    db_session.expire_all()
    stored = db_session.get(Post, post.id)
    assert stored.comment_count == 0
    assert ensure_utc(stored.updated_at) == last_edit
