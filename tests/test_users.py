"""
Profile, stats and friend management
"""
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from quizzard.models import Friendship, Score, User

from helpers import add_scores, auth_header, create_user


def test_get_profile_hides_password(client, db):
    user = create_user(db, "testuser", "test@example.com")

    response = client.get("/api/user/me", headers=auth_header(user))

    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "testuser"
    assert body["email"] == "test@example.com"
    assert body["mana"] == 0
    assert body["mageMeter"] == 0
    assert body["friends"] == []
    assert "password" not in body
    assert "password_hash" not in body


def test_profile_of_deleted_user_is_not_found(client, db):
    user = create_user(db, "ghost", "ghost@example.com")
    headers = auth_header(user)
    db.delete(user)
    db.commit()

    response = client.get("/api/user/me", headers=headers)

    assert response.status_code == 404


def test_update_profile(client, db):
    user = create_user(db, "testuser", "test@example.com")

    response = client.put(
        "/api/user/me",
        headers=auth_header(user),
        json={"username": "updateduser", "email": "New@Example.com"},
    )

    assert response.status_code == 200
    assert response.json()["username"] == "updateduser"
    assert response.json()["email"] == "new@example.com"


def test_update_profile_rejects_taken_username(client, db):
    user = create_user(db, "testuser", "test@example.com")
    create_user(db, "taken", "taken@example.com")

    response = client.put("/api/user/me", headers=auth_header(user), json={"username": "taken"})

    assert response.status_code == 400
    assert response.json()["error"] == "Username already in use"


def test_change_password(client, db):
    user = create_user(db, "testuser", "test@example.com", password="password123")
    headers = auth_header(user)

    wrong = client.post(
        "/api/user/change-password",
        headers=headers,
        json={"currentPassword": "nope-nope", "newPassword": "newpass456"},
    )
    assert wrong.status_code == 400

    response = client.post(
        "/api/user/change-password",
        headers=headers,
        json={"currentPassword": "password123", "newPassword": "newpass456"},
    )
    assert response.status_code == 200

    login = client.post("/api/auth/login", json={"email": "test@example.com", "password": "newpass456"})
    assert login.status_code == 200


def test_delete_account_clears_friend_references(client, db):
    user = create_user(db, "testuser", "test@example.com")
    friend = create_user(db, "testfriend", "friend@example.com")
    user_id = user.id
    client.post("/api/user/friends", headers=auth_header(friend), json={"username": "testuser"})

    response = client.delete("/api/user/me", headers=auth_header(user))

    assert response.status_code == 200
    assert response.json()["message"] == "Account deleted successfully"
    db.expire_all()
    assert db.query(User).filter(User.id == user_id).first() is None
    assert db.query(Friendship).filter(Friendship.friend_id == user_id).count() == 0

    friends = client.get("/api/user/friends", headers=auth_header(friend)).json()["friends"]
    assert friends == []


def test_public_stats(client, db):
    user = create_user(db, "testuser", "test@example.com", mana=50, mage_meter=75)

    response = client.get(f"/api/user/stats/{user.id}")

    assert response.status_code == 200
    assert response.json() == {"mana": 50, "mageMeter": 75}


def test_public_stats_bad_and_unknown_ids(client):
    assert client.get("/api/user/stats/not-a-uuid").status_code == 400
    assert client.get(f"/api/user/stats/{uuid4()}").status_code == 404


def test_add_friend(client, db):
    user = create_user(db, "testuser", "test@example.com")
    friend = create_user(db, "testfriend", "friend@example.com")

    response = client.post("/api/user/friends", headers=auth_header(user), json={"username": "testfriend"})

    assert response.status_code == 200
    assert response.json()["user"]["friends"] == [str(friend.id)]


def test_add_friend_twice_is_rejected(client, db):
    user = create_user(db, "testuser", "test@example.com")
    create_user(db, "testfriend", "friend@example.com")
    headers = auth_header(user)

    client.post("/api/user/friends", headers=headers, json={"username": "testfriend"})
    response = client.post("/api/user/friends", headers=headers, json={"username": "testfriend"})

    assert response.status_code == 400
    assert response.json()["error"] == "Already friends"
    profile = client.get("/api/user/me", headers=headers).json()
    assert len(profile["friends"]) == 1


def test_add_self_as_friend_is_rejected(client, db):
    user = create_user(db, "testuser", "test@example.com")

    response = client.post("/api/user/friends", headers=auth_header(user), json={"username": "testuser"})

    assert response.status_code == 400
    assert response.json()["error"] == "You cannot add yourself as a friend"


def test_friend_operations_on_unknown_user(client, db):
    user = create_user(db, "testuser", "test@example.com")
    headers = auth_header(user)

    added = client.post("/api/user/friends", headers=headers, json={"username": "nobody"})
    removed = client.request("DELETE", "/api/user/friends", headers=headers, json={"username": "nobody"})

    assert added.status_code == 404
    assert removed.status_code == 404


def test_remove_friend(client, db):
    user = create_user(db, "testuser", "test@example.com")
    friend = create_user(db, "testfriend", "friend@example.com")
    headers = auth_header(user)
    client.post("/api/user/friends", headers=headers, json={"username": "testfriend"})

    response = client.request("DELETE", "/api/user/friends", headers=headers, json={"username": "testfriend"})

    assert response.status_code == 200
    assert str(friend.id) not in response.json()["user"]["friends"]
    friends = client.get("/api/user/friends", headers=headers).json()["friends"]
    assert friends == []


def test_remove_non_friend_is_rejected(client, db):
    user = create_user(db, "testuser", "test@example.com")
    create_user(db, "stranger", "stranger@example.com")

    response = client.request(
        "DELETE", "/api/user/friends", headers=auth_header(user), json={"username": "stranger"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Not friends"


def test_friends_list_strips_credentials(client, db):
    user = create_user(db, "testuser", "test@example.com")
    friend = create_user(db, "testfriend", "friend@example.com", mana=12, mage_meter=40)
    other = create_user(db, "other", "other@example.com")
    headers = auth_header(user)
    client.post("/api/user/friends", headers=headers, json={"username": "testfriend"})
    client.post("/api/user/friends", headers=headers, json={"username": "other"})

    response = client.get("/api/user/friends", headers=headers)

    assert response.status_code == 200
    friends = response.json()["friends"]
    assert [f["id"] for f in friends] == [str(friend.id), str(other.id)]
    assert friends[0] == {"id": str(friend.id), "username": "testfriend", "mana": 12, "mageMeter": 40}


def test_delete_account_keeps_score_history(client, db):
    user = create_user(db, "testuser", "test@example.com")
    other = create_user(db, "other", "other@example.com")
    user_id = user.id
    add_scores(db, user, 3)
    add_scores(db, other, 2)

    response = client.delete("/api/user/me", headers=auth_header(user))

    assert response.status_code == 200
    db.expire_all()
    assert db.query(Score).count() == 5
    assert db.query(Score).filter(Score.user_id == user_id).count() == 0
    assert db.query(Score).filter(Score.user_id.is_(None)).count() == 3

    rows = client.get("/api/leaderboard/global").json()["leaderboard"]
    assert rows == [{"username": "other", "mana": 0, "mageMeter": 0, "totalQuizzes": 2}]


def test_duplicate_friend_pair_is_rejected_by_database(db):
    user = create_user(db, "testuser", "test@example.com")
    friend = create_user(db, "testfriend", "friend@example.com")
    db.add(Friendship(user_id=user.id, friend_id=friend.id))
    db.commit()

    db.add(Friendship(user_id=user.id, friend_id=friend.id))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
