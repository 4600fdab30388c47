import pytest


def _toggle_states(client, headers, path, times=3):
    states = []
    for _ in range(times):
        r = client.post(path, headers=headers)
        states.append((r.status_code, r.json()["data"]["isLiked"]))
    return states


def test_video_like_toggles_existence(client, make_user, publish):
    headers, _ = make_user("lara")
    video = publish(headers)

    states = _toggle_states(client, headers, f"/api/likes/toggle/v/{video['id']}")
    assert states == [(201, True), (200, False), (201, True)]


def test_comment_and_tweet_likes_are_scoped_to_target(client, make_user, publish):
    headers, _ = make_user("liam")
    video = publish(headers)
    comment_id = client.post(
        f"/api/comments/{video['id']}", headers=headers, json={"content": "nice"}
    ).json()["data"]["id"]
    tweet_id = client.post("/api/tweets/", headers=headers, json={"content": "hello"}).json()["data"]["id"]

    assert _toggle_states(client, headers, f"/api/likes/toggle/c/{comment_id}") == [
        (201, True), (200, False), (201, True),
    ]
    assert _toggle_states(client, headers, f"/api/likes/toggle/t/{tweet_id}", times=2) == [
        (201, True), (200, False),
    ]

    # Liking the comment did not touch the video's like state
    r = client.post(f"/api/likes/toggle/v/{video['id']}", headers=headers)
    assert r.json()["data"]["isLiked"] is True


def test_likes_of_different_users_are_independent(client, make_user, publish):
    headers1, _ = make_user("mona")
    headers2, _ = make_user("milo")
    video = publish(headers1)

    assert client.post(f"/api/likes/toggle/v/{video['id']}", headers=headers1).json()["data"]["isLiked"]
    assert client.post(f"/api/likes/toggle/v/{video['id']}", headers=headers2).json()["data"]["isLiked"]

    r = client.get("/api/likes/videos", headers=headers2)
    assert [entry["video"]["id"] for entry in r.json()["data"]] == [video["id"]]


def test_liked_videos_skip_deleted_videos(client, make_user, publish):
    headers, _ = make_user("maya")
    kept = publish(headers, title="Kept")
    removed = publish(headers, title="Removed")
    for video in (kept, removed):
        client.post(f"/api/likes/toggle/v/{video['id']}", headers=headers)

    assert client.delete(f"/api/videos/{removed['id']}", headers=headers).status_code == 200

    r = client.get("/api/likes/videos", headers=headers)
    assert r.status_code == 200
    assert [entry["video"]["title"] for entry in r.json()["data"]] == ["Kept"]


@pytest.mark.parametrize("kind", ["v", "c", "t"])
def test_toggle_like_on_missing_target(client, make_user, kind):
    headers, _ = make_user("nora")
    r = client.post(f"/api/likes/toggle/{kind}/5b1f3c1e-2d4a-4c61-9a5e-0e7f1b2c3d4e", headers=headers)
    assert r.status_code == 404


@pytest.mark.parametrize("kind", ["v", "c", "t"])
def test_toggle_like_with_malformed_id(client, make_user, kind):
    headers, _ = make_user("noel")
    r = client.post(f"/api/likes/toggle/{kind}/not-an-id", headers=headers)
    assert r.status_code == 400
