"""End-to-end API scenarios against a temporary SQLite database."""

import pytest
from litestar.testing import TestClient

from tubeline.asgi import create_app

API = "/api/v1"
PNG = b"\x89PNG\r\n\x1a\n fake image"


@pytest.fixture
def client(settings):
    with TestClient(app=create_app(settings)) as client:
        yield client


def register(client, username, email=None, password="secret", full_name="Ada Lovelace", avatar=PNG):
    files = {"avatar": (f"{username}.png", avatar, "image/png")} if avatar else None
    return client.post(
        f"{API}/users/register",
        data={"fullName": full_name, "email": email or f"{username}@x.com", "username": username, "password": password},
        files=files,
    )


def login(client, username, password="secret"):
    return client.post(f"{API}/users/login", json={"username": username, "password": password})


def auth_header(login_response):
    return {"Authorization": f"Bearer {login_response.json()['data']['accessToken']}"}


class TestRegistration:
    def test_register_lowercases_username(self, client):
        response = register(client, "Ada", email="ada@x.com")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["statusCode"] == 201
        assert body["data"]["username"] == "ada"
        assert body["data"]["fullName"] == "Ada Lovelace"
        assert "passwordHash" not in body["data"]
        assert "refreshToken" not in body["data"]

    def test_avatar_is_served(self, client):
        avatar_url = register(client, "ada").json()["data"]["avatar"]
        assert client.get(avatar_url).content == PNG

    def test_blank_field(self, client):
        response = register(client, "ada", full_name="  ")
        assert response.status_code == 400
        assert response.json()["message"] == "All fields are required"

    def test_missing_avatar(self, client):
        response = register(client, "ada", avatar=None)
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_duplicate_username(self, client):
        register(client, "ada")
        response = register(client, "ADA", email="other@x.com")
        assert response.status_code == 409


class TestSession:
    def test_wrong_password(self, client):
        register(client, "ada")
        response = login(client, "ada", password="wrong")

        assert response.status_code == 401
        assert "accessToken" not in response.cookies

    def test_unknown_user(self, client):
        assert login(client, "nobody").status_code == 404

    def test_login_sets_cookies_and_authenticates(self, client):
        register(client, "ada")
        response = login(client, "ada")

        assert response.status_code == 200
        assert response.json()["data"]["user"]["username"] == "ada"
        assert "accessToken" in response.cookies

        current = client.get(f"{API}/users/current-user")
        assert current.status_code == 200
        assert current.json()["data"]["email"] == "ada@x.com"

    def test_protected_route_requires_token(self, client):
        response = client.get(f"{API}/users/current-user")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_refresh_rotation_rejects_stale_token(self, client):
        register(client, "ada")
        original = login(client, "ada").json()["data"]["refreshToken"]
        client.cookies.clear()

        rotated = client.post(f"{API}/users/refresh-token", json={"refreshToken": original})
        assert rotated.status_code == 200
        assert rotated.json()["data"]["refreshToken"] != original

        client.cookies.clear()
        replay = client.post(f"{API}/users/refresh-token", json={"refreshToken": original})
        assert replay.status_code == 401

    def test_refresh_without_token(self, client):
        assert client.post(f"{API}/users/refresh-token").status_code == 401

    def test_refresh_from_form_body(self, client):
        register(client, "ada")
        refresh = login(client, "ada").json()["data"]["refreshToken"]
        client.cookies.clear()

        response = client.post(f"{API}/users/refresh-token", data={"refreshToken": refresh})

        assert response.status_code == 200
        assert response.json()["data"]["refreshToken"] != refresh

    def test_refresh_with_unreadable_body(self, client):
        response = client.post(
            f"{API}/users/refresh-token", content=b"not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_logout_revokes_refresh_token(self, client):
        register(client, "ada")
        session = login(client, "ada")
        refresh = session.json()["data"]["refreshToken"]

        assert client.post(f"{API}/users/logout", headers=auth_header(session)).status_code == 200

        client.cookies.clear()
        assert client.post(f"{API}/users/refresh-token", json={"refreshToken": refresh}).status_code == 401

    def test_change_password(self, client):
        register(client, "ada")
        headers = auth_header(login(client, "ada"))

        bad = client.post(
            f"{API}/users/change-password", json={"oldPassword": "nope", "newPassword": "n3w"}, headers=headers
        )
        assert bad.status_code == 400

        ok = client.post(
            f"{API}/users/change-password", json={"oldPassword": "secret", "newPassword": "n3w"}, headers=headers
        )
        assert ok.status_code == 200
        assert login(client, "ada", password="n3w").status_code == 200


class TestProfile:
    def test_update_account(self, client):
        register(client, "ada")
        login(client, "ada")

        blank = client.patch(f"{API}/users/update-account", json={"fullName": "Ada", "email": ""})
        assert blank.status_code == 400

        response = client.patch(f"{API}/users/update-account", json={"fullName": "Ada King", "email": "ada@king.org"})
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "ada@king.org"

    def test_replace_avatar_removes_old_file(self, client):
        old_url = register(client, "ada").json()["data"]["avatar"]
        login(client, "ada")

        response = client.patch(f"{API}/users/avatar", files={"avatar": ("new.png", b"new avatar", "image/png")})

        assert response.status_code == 200
        new_url = response.json()["data"]["avatar"]
        assert new_url != old_url
        assert client.get(old_url).status_code == 404

    def test_cover_image_requires_file(self, client):
        register(client, "ada")
        login(client, "ada")
        assert client.patch(f"{API}/users/cover-image", files={"other": ("x.png", b"x", "image/png")}).status_code == 400


class TestTweets:
    def test_crud_and_ownership(self, client):
        register(client, "ada")
        register(client, "bob", full_name="Bob")
        ada = auth_header(login(client, "ada"))
        bob = auth_header(login(client, "bob"))
        client.cookies.clear()

        created = client.post(f"{API}/tweets", json={"content": "first"}, headers=ada)
        assert created.status_code == 201
        tweet_id = created.json()["data"]["id"]

        forbidden = client.patch(f"{API}/tweets/{tweet_id}", json={"content": "mine now"}, headers=bob)
        assert forbidden.status_code == 403

        untouched = client.patch(f"{API}/tweets/{tweet_id}", json={"content": "   "}, headers=ada)
        assert untouched.status_code == 200
        assert untouched.json()["data"]["content"] == "first"

        empty = client.patch(f"{API}/tweets/{tweet_id}", json={"content": ""}, headers=ada)
        assert empty.status_code == 400

        assert client.delete(f"{API}/tweets/{tweet_id}", headers=bob).status_code == 403
        deleted = client.delete(f"{API}/tweets/{tweet_id}", headers=ada)
        assert deleted.status_code == 200
        assert deleted.json()["data"]["content"] == "first"

        assert client.get(f"{API}/tweets/user", headers=ada).json()["data"] == []

    def test_malformed_and_unknown_ids(self, client):
        register(client, "ada")
        headers = auth_header(login(client, "ada"))

        assert client.patch(f"{API}/tweets/not-a-uuid", json={"content": "x"}, headers=headers).status_code == 400
        unknown = "00000000-0000-0000-0000-000000000000"
        assert client.patch(f"{API}/tweets/{unknown}", json={"content": "x"}, headers=headers).status_code == 404

    def test_empty_content_rejected(self, client):
        register(client, "ada")
        headers = auth_header(login(client, "ada"))
        assert client.post(f"{API}/tweets", json={"content": ""}, headers=headers).status_code == 400

    def test_feed_like_count_and_flag(self, client):
        register(client, "ada")
        register(client, "bob", full_name="Bob")
        ada = auth_header(login(client, "ada"))
        bob = auth_header(login(client, "bob"))
        client.cookies.clear()

        tweet_id = client.post(f"{API}/tweets", json={"content": "hello"}, headers=ada).json()["data"]["id"]

        liked = client.post(f"{API}/likes/toggle/t/{tweet_id}", headers=bob)
        assert liked.json()["data"] == {"isLiked": True}

        ada_id = client.get(f"{API}/users/current-user", headers=ada).json()["data"]["id"]
        feed = client.get(f"{API}/tweets/user/{ada_id}", headers=bob).json()["data"]
        assert feed[0]["likeCount"] == 1
        assert feed[0]["isLiked"] is True
        assert feed[0]["username"] == "ada"

        own_feed = client.get(f"{API}/tweets/user", headers=ada).json()["data"]
        assert own_feed[0]["isLiked"] is False

        unliked = client.post(f"{API}/likes/toggle/t/{tweet_id}", headers=bob)
        assert unliked.json()["data"] == {"isLiked": False}
        feed = client.get(f"{API}/tweets/user/{ada_id}", headers=bob).json()["data"]
        assert feed[0]["likeCount"] == 0


class TestSubscriptions:
    def test_toggle_twice(self, client):
        register(client, "ada")
        channel_id = register(client, "bob", full_name="Bob").json()["data"]["id"]
        ada = auth_header(login(client, "ada"))
        client.cookies.clear()

        first = client.post(f"{API}/subscriptions/c/{channel_id}", headers=ada)
        assert first.status_code == 200
        assert first.json()["message"] == "subscribed"
        assert first.json()["data"]["channel"] == channel_id

        profile = client.get(f"{API}/users/c/BOB", headers=ada).json()["data"]
        assert profile["subscribersCount"] == 1
        assert profile["isSubscribed"] is True

        channels = client.get(f"{API}/subscriptions/u", headers=ada).json()["data"]
        assert channels[0]["channelInfo"]["username"] == "bob"

        subscribers = client.get(f"{API}/subscriptions/c/{channel_id}", headers=ada).json()["data"]
        assert subscribers[0]["subscriberInfo"]["username"] == "ada"

        second = client.post(f"{API}/subscriptions/c/{channel_id}", headers=ada)
        assert second.json()["message"] == "unsubscribed"

        profile = client.get(f"{API}/users/c/bob", headers=ada).json()["data"]
        assert profile["subscribersCount"] == 0
        assert profile["isSubscribed"] is False

    def test_unknown_channel_profile(self, client):
        register(client, "ada")
        headers = auth_header(login(client, "ada"))
        assert client.get(f"{API}/users/c/nobody", headers=headers).status_code == 404

    def test_malformed_channel_id(self, client):
        register(client, "ada")
        headers = auth_header(login(client, "ada"))
        assert client.get(f"{API}/subscriptions/c/123", headers=headers).status_code == 400


class TestVideos:
    def _publish(self, client, headers, title):
        return client.post(
            f"{API}/videos",
            data={"title": title, "description": "notes", "duration": "12.5"},
            files={
                "videoFile": (f"{title}.mp4", title.encode() + b" video", "video/mp4"),
                "thumbnail": (f"{title}.png", title.encode() + b" thumb", "image/png"),
            },
            headers=headers,
        )

    def test_rewatch_moves_to_front(self, client):
        register(client, "ada")
        headers = auth_header(login(client, "ada"))
        client.cookies.clear()

        first = self._publish(client, headers, "first")
        assert first.status_code == 201
        first_id = first.json()["data"]["id"]
        second_id = self._publish(client, headers, "second").json()["data"]["id"]

        client.get(f"{API}/videos/{first_id}", headers=headers)
        client.get(f"{API}/videos/{second_id}", headers=headers)
        watched = client.get(f"{API}/videos/{first_id}", headers=headers)
        assert watched.json()["data"]["views"] == 2

        history = client.get(f"{API}/users/history", headers=headers).json()["data"]
        assert [video["id"] for video in history] == [first_id, second_id]
        assert history[0]["owner"]["username"] == "ada"

    def test_like_video(self, client):
        register(client, "ada")
        headers = auth_header(login(client, "ada"))
        video_id = self._publish(client, headers, "clip").json()["data"]["id"]

        assert client.post(f"{API}/likes/toggle/v/{video_id}", headers=headers).json()["data"]["isLiked"] is True

    def test_publish_requires_files(self, client):
        register(client, "ada")
        headers = auth_header(login(client, "ada"))
        response = client.post(f"{API}/videos", data={"title": "t", "description": "d"}, headers=headers)
        assert response.status_code == 400


def test_shared_avatar_survives_replacement(client):
    shared_url = register(client, "ada").json()["data"]["avatar"]
    register(client, "bob", full_name="Bob")
    login(client, "ada")

    client.patch(f"{API}/users/avatar", files={"avatar": ("new.png", b"new avatar", "image/png")})

    assert client.get(shared_url).content == PNG
