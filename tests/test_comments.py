def test_list_comments_of_video_without_comments_is_404(client, make_user, publish):
    headers, _ = make_user("carla")
    video = publish(headers)

    r = client.get(f"/api/comments/{video['id']}", headers=headers)
    assert r.status_code == 404
    body = r.json()
    assert body["message"].startswith("No comments found")
    assert body["success"] is False
    assert body["statusCode"] == 404


def test_add_and_list_comments(client, make_user, publish):
    headers, user_id = make_user("cesar")
    video = publish(headers)
    for i in range(3):
        r = client.post(f"/api/comments/{video['id']}", headers=headers, json={"content": f"comment {i}"})
        assert r.status_code == 201
        assert r.json()["data"]["owner_id"] == user_id

    r = client.get(f"/api/comments/{video['id']}?page=1&limit=2", headers=headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert len(data["comments"]) == 2
    assert data["count"] == 3
    assert data["pagination"] == {"currentPage": 1, "totalPages": 2}

    # Past the last page the listing is empty, which is reported as 404
    r = client.get(f"/api/comments/{video['id']}?page=3&limit=2", headers=headers)
    assert r.status_code == 404


def test_comment_requires_content_and_existing_video(client, make_user, publish):
    headers, _ = make_user("clara")
    video = publish(headers)

    r = client.post(f"/api/comments/{video['id']}", headers=headers, json={"content": "   "})
    assert r.status_code == 400
    assert r.json()["message"] == "Content is required."

    r = client.post(
        "/api/comments/5b1f3c1e-2d4a-4c61-9a5e-0e7f1b2c3d4e", headers=headers, json={"content": "hi"}
    )
    assert r.status_code == 404


def test_owner_updates_and_deletes_comment(client, make_user, publish):
    headers, _ = make_user("conan")
    video = publish(headers)
    comment_id = client.post(
        f"/api/comments/{video['id']}", headers=headers, json={"content": "first"}
    ).json()["data"]["id"]

    r = client.patch(f"/api/comments/c/{comment_id}", headers=headers, json={"content": "edited"})
    assert r.status_code == 200
    assert r.json()["data"]["content"] == "edited"

    r = client.delete(f"/api/comments/c/{comment_id}", headers=headers)
    assert r.status_code == 200
    r = client.get(f"/api/comments/{video['id']}", headers=headers)
    assert r.status_code == 404
