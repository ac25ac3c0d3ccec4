# tests/v1/test_profile.py
"""Tests for the caller's profile endpoints."""

from fastapi import status

from guildhall.models import PostBookmark, PostLike

PROFILE = "/api/v1/profile"


def test_profile_stats(
    client, db_session, make_post, make_comment, test_user, other_user, auth_token
):
    post = make_post(test_user, like_count=4)
    make_post(test_user, like_count=10, is_deleted=True)
    make_comment(post, test_user)
    db_session.add(PostBookmark(post_id=post.id, user_id=test_user.id))
    db_session.commit()

    data = client.get(PROFILE, headers=auth_token).json()["data"]
    assert data["user"]["username"] == "alice"
    assert data["stats"] == {
        "post_count": 1,
        "comment_count": 1,
        "likes_received": 4,
        "bookmark_count": 1,
    }


def test_update_profile(client, auth_token):
    response = client.put(
        PROFILE,
        json={"display_name": "Alice the Bold", "bio": "Tank main"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["display_name"] == "Alice the Bold"
    assert data["bio"] == "Tank main"


def test_update_profile_rejects_long_name(client, auth_token):
    response = client.put(PROFILE, json={"display_name": "x" * 101}, headers=auth_token)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_my_posts_and_comments(client, make_post, make_comment, test_user, other_user, auth_token):
    mine = make_post(test_user, title="Mine")
    theirs = make_post(other_user, title="Theirs")
    comment = make_comment(theirs, test_user)

    posts = client.get(f"{PROFILE}/posts", headers=auth_token).json()["data"]["posts"]
    comments = client.get(f"{PROFILE}/comments", headers=auth_token).json()["data"]["comments"]
    assert [p["id"] for p in posts] == [mine.id]
    assert [c["id"] for c in comments] == [comment.id]


def test_my_likes(client, db_session, make_post, test_user, other_user, auth_token):
    liked = make_post(other_user, title="Liked")
    make_post(other_user, title="Ignored")
    db_session.add(PostLike(post_id=liked.id, user_id=test_user.id))
    db_session.commit()

    posts = client.get(f"{PROFILE}/likes", headers=auth_token).json()["data"]["posts"]
    assert [p["id"] for p in posts] == [liked.id]


def test_my_reports(client, test_comment, auth_token, other_auth_token):
    client.post(
        "/api/v1/reports",
        json={"reported_type": "comment", "reported_id": test_comment.id, "reason": "rude"},
        headers=auth_token,
    )
    mine = client.get(f"{PROFILE}/reports", headers=auth_token).json()["data"]
    theirs = client.get(f"{PROFILE}/reports", headers=other_auth_token).json()["data"]
    assert mine["pagination"]["total_items"] == 1
    assert theirs["reports"] == []


def test_profile_requires_auth(client):
    assert client.get(PROFILE).status_code == status.HTTP_401_UNAUTHORIZED
