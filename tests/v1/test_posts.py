# tests/v1/test_posts.py
"""Tests for post endpoints."""

from datetime import UTC, datetime

import pytest
from fastapi import status

from guildhall.db.time import ensure_utc
from guildhall.models import Post

POSTS = "/api/v1/posts"


def test_create_post_success(client, test_user, auth_token):
    response = client.post(
        POSTS,
        json={
            "title": "  Raid guide  ",
            "content": "Bring fire resistance",
            "category": "guide",
            "game_id": 3,
            "tags": ["raid", " pve "],
        },
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]
    assert data["title"] == "Raid guide"
    assert data["category"] == "guide"
    assert data["tags"] == ["raid", "pve"]
    assert data["user_id"] == test_user.id
    assert data["like_count"] == 0
    assert data["comment_count"] == 0
    assert data["is_deleted"] is False


def test_create_post_defaults_category(client, auth_token):
    response = client.post(POSTS, json={"title": "Hello", "content": "World"}, headers=auth_token)
    assert response.json()["data"]["category"] == "discussion"


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "", "content": "body"},
        {"title": "title", "content": "   "},
        {"title": "x" * 201, "content": "body"},
        {"title": "title", "content": "x" * 50_001},
        {"title": "title", "content": "body", "category": "memes"},
    ],
)
def test_create_post_validation(client, auth_token, payload):
    response = client.post(POSTS, json=payload, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_create_post_accepts_limits(client, auth_token):
    response = client.post(
        POSTS, json={"title": "x" * 200, "content": "y" * 50_000}, headers=auth_token
    )
    assert response.status_code == status.HTTP_201_CREATED


def test_get_post_counts_views(client, test_post):
    first = client.get(f"{POSTS}/{test_post.id}")
    second = client.get(f"{POSTS}/{test_post.id}")
    assert first.status_code == status.HTTP_200_OK
    assert first.json()["data"]["post"]["view_count"] == 1
    assert second.json()["data"]["post"]["view_count"] == 2
    assert "liked" not in first.json()["data"]


def test_viewing_post_keeps_updated_at(client, db_session, make_post, test_user):
    last_edit = datetime(2024, 1, 1, tzinfo=UTC)
    post = make_post(test_user, updated_at=last_edit)

    client.get(f"{POSTS}/{post.id}")

    db_session.expire_all()
    stored = db_session.get(Post, post.id)
    assert stored.view_count == 1
    assert ensure_utc(stored.updated_at) == last_edit


def test_get_post_reports_caller_engagement(client, test_post, other_auth_token):
    client.post(f"/api/v1/post-likes/{test_post.id}", headers=other_auth_token)
    data = client.get(f"{POSTS}/{test_post.id}", headers=other_auth_token).json()["data"]
    assert data["liked"] is True
    assert data["bookmarked"] is False


def test_get_missing_post(client):
    response = client.get(f"{POSTS}/9999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_update_post_by_owner(client, test_post, auth_token):
    response = client.put(
        f"{POSTS}/{test_post.id}",
        json={"title": "Updated", "content": "New body", "category": "news"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["title"] == "Updated"
    assert response.json()["data"]["category"] == "news"


def test_update_post_by_stranger_is_forbidden(client, test_post, other_auth_token, db_session):
    response = client.put(
        f"{POSTS}/{test_post.id}",
        json={"title": "Hijacked", "content": "body"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    db_session.refresh(test_post)
    assert test_post.title == "Patch notes"


def test_update_post_by_admin(client, test_post, admin_token):
    response = client.put(
        f"{POSTS}/{test_post.id}",
        json={"title": "Moderated", "content": "body"},
        headers=admin_token,
    )
    assert response.status_code == status.HTTP_200_OK


def test_update_checks_ownership_before_validation(client, test_post, other_auth_token):
    response = client.put(
        f"{POSTS}/{test_post.id}", json={"title": "", "content": ""}, headers=other_auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_delete_post_is_soft(client, db_session, test_post, auth_token):
    response = client.delete(f"{POSTS}/{test_post.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK

    db_session.expire_all()
    stored = db_session.get(Post, test_post.id)
    assert stored is not None
    assert stored.is_deleted is True
    assert stored.deleted_at is not None
    assert client.get(f"{POSTS}/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND


def test_delete_post_by_stranger_is_forbidden(client, test_post, other_auth_token):
    response = client.delete(f"{POSTS}/{test_post.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_delete_post_by_admin(client, test_post, admin_token):
    response = client.delete(f"{POSTS}/{test_post.id}", headers=admin_token)
    assert response.status_code == status.HTTP_200_OK


def test_list_excludes_deleted_posts_from_items_and_totals(client, make_post, test_user):
    live = [make_post(test_user, title=f"Live {i}") for i in range(3)]
    make_post(test_user, title="Gone", is_deleted=True)

    response = client.get(POSTS)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert {post["id"] for post in data["posts"]} == {post.id for post in live}
    assert data["pagination"] == {
        "current_page": 1,
        "total_pages": 1,
        "total_items": 3,
        "items_per_page": 20,
    }


def test_list_puts_pinned_posts_first(client, make_post, test_user):
    make_post(test_user, title="Older pinned", is_pinned=True)
    make_post(test_user, title="Newer")
    titles = [post["title"] for post in client.get(POSTS).json()["data"]["posts"]]
    assert titles[0] == "Older pinned"


def test_list_filters(client, make_post, test_user, other_user):
    make_post(test_user, title="Speedrun route", category="guide", game_id=1)
    make_post(other_user, title="Fan art", category="fanart", game_id=2)

    def titles(**params):
        return [p["title"] for p in client.get(POSTS, params=params).json()["data"]["posts"]]

    assert titles(category="guide") == ["Speedrun route"]
    assert titles(game_id=2) == ["Fan art"]
    assert titles(search="speedrun") == ["Speedrun route"]
    assert titles(user_id=other_user.id) == ["Fan art"]


def test_search_matches_wildcards_literally(client, make_post, test_user):
    make_post(test_user, title="100% drop rate")
    make_post(test_user, title="Patch notes")
    make_post(test_user, title="new_game_plus tips")

    def titles(search):
        posts = client.get(POSTS, params={"search": search}).json()["data"]["posts"]
        return [p["title"] for p in posts]

    assert titles("100%") == ["100% drop rate"]
    assert titles("%") == ["100% drop rate"]
    assert titles("_") == ["new_game_plus tips"]


def test_list_pagination(client, make_post, test_user):
    for i in range(5):
        make_post(test_user, title=f"Post {i}")
    data = client.get(POSTS, params={"page": 2, "limit": 2}).json()["data"]
    assert len(data["posts"]) == 2
    assert data["pagination"]["total_pages"] == 3
    assert data["pagination"]["current_page"] == 2


@pytest.mark.parametrize(
    ("params", "expected_page", "expected_limit"),
    [
        ({"page": 0, "limit": 500}, 1, 100),
        ({"page": -3, "limit": 0}, 1, 1),
        ({}, 1, 20),
    ],
)
def test_pagination_is_clamped(client, params, expected_page, expected_limit):
    pagination = client.get(POSTS, params=params).json()["data"]["pagination"]
    assert pagination["current_page"] == expected_page
    assert pagination["items_per_page"] == expected_limit
