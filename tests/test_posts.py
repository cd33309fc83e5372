import asyncio

from bson import ObjectId

MISSING_ID = str(ObjectId())


def owner_body(user_id):
    return {"userID": user_id}


def test_create_post_defaults_date(client, make_user):
    user = make_user()

    response = client.post("/api/posts", json={"title": "첫 글", "content": "안녕하세요", "userID": user["_id"]})

    assert response.status_code == 200
    body = response.json()
    assert ObjectId.is_valid(body["_id"])
    assert body["userID"] == user["_id"]
    assert body["title"] == "첫 글"
    assert body["date"] is not None


def test_create_post_for_missing_user_returns_404(client, mongodb):
    response = client.post("/api/posts", json={"title": "t", "content": "c", "userID": MISSING_ID})

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"
    assert asyncio.run(mongodb["posts"].count_documents({})) == 0


def test_create_post_with_malformed_user_id_returns_404(client):
    response = client.post("/api/posts", json={"title": "t", "content": "c", "userID": "nope"})

    assert response.status_code == 404


def test_create_post_validation_error(client, make_user):
    user = make_user()

    response = client.post("/api/posts", json={"title": "", "content": "c", "userID": user["_id"]})

    assert response.status_code == 400
    assert response.json()["detail"].startswith('"title"')


def test_delete_post_by_owner(client, make_user, make_post):
    user = make_user()
    post = make_post(user["_id"])

    response = client.request("DELETE", f"/api/posts/{post['_id']}", json=owner_body(user["_id"]))

    assert response.status_code == 200
    assert response.json() == post
    assert client.get("/api/posts").json() == []


def test_delete_post_by_other_user_is_forbidden(client, make_user, make_post):
    owner = make_user()
    intruder = make_user()
    post = make_post(owner["_id"])

    response = client.request("DELETE", f"/api/posts/{post['_id']}", json=owner_body(intruder["_id"]))

    assert response.status_code == 403
    assert response.json()["detail"] == "You are not authorized to delete this post"
    assert client.get("/api/posts").json() == [post]


def test_delete_post_without_body_is_forbidden(client, make_user, make_post):
    post = make_post(make_user()["_id"])

    response = client.delete(f"/api/posts/{post['_id']}")

    assert response.status_code == 403


def test_delete_missing_post_returns_404(client, make_user):
    user = make_user()

    response = client.request("DELETE", f"/api/posts/{MISSING_ID}", json=owner_body(user["_id"]))

    assert response.status_code == 404
    assert response.json()["detail"] == "Post not found"


def test_update_post_by_owner(client, make_user, make_post):
    user = make_user()
    post = make_post(user["_id"])

    response = client.put(
        f"/api/posts/{post['_id']}",
        json={"title": "수정된 제목", "content": "수정된 내용", "userID": user["_id"]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["_id"] == post["_id"]
    assert body["title"] == "수정된 제목"
    assert body["content"] == "수정된 내용"
    assert body["date"] == post["date"]


def test_update_post_by_other_user_leaves_post_unchanged(client, make_user, make_post):
    owner = make_user()
    intruder = make_user()
    post = make_post(owner["_id"])

    response = client.put(
        f"/api/posts/{post['_id']}",
        json={"title": "hijacked", "content": "hijacked", "userID": intruder["_id"]},
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "You are not authorized to update this post"
    assert client.get("/api/posts").json() == [post]


def test_update_missing_post_returns_404(client, make_user):
    user = make_user()

    response = client.put(f"/api/posts/{MISSING_ID}", json={"title": "t", "content": "c", "userID": user["_id"]})

    assert response.status_code == 404


def test_update_post_validates_before_lookup(client):
    response = client.put(f"/api/posts/{MISSING_ID}", json={"title": "t"})

    assert response.status_code == 400
    assert response.json()["detail"] == '"content" is required'


def test_list_posts(client, make_user, make_post):
    user = make_user()
    first = make_post(user["_id"], title="one")
    second = make_post(user["_id"], title="two")

    response = client.get("/api/posts")

    assert response.status_code == 200
    assert response.json() == [first, second]


def test_list_posts_with_users_expands_owner(client, make_user, make_post):
    user = make_user()
    post = make_post(user["_id"])

    response = client.get("/api/posts/withUsers")

    assert response.status_code == 200
    [expanded] = response.json()
    assert expanded["_id"] == post["_id"]
    assert expanded["userID"] == user


def test_list_posts_with_users_of_deleted_owner_is_null(client, make_user, make_post):
    user = make_user()
    make_post(user["_id"])
    client.delete(f"/api/users/{user['_id']}")

    [expanded] = client.get("/api/posts/withUsers").json()

    assert expanded["userID"] is None


def test_sorted_posts_are_newest_first(client, make_user, make_post):
    user = make_user()
    make_post(user["_id"], title="middle", date="2024-02-01T00:00:00")
    make_post(user["_id"], title="oldest", date="2024-01-01T00:00:00")
    make_post(user["_id"], title="newest", date="2024-03-01T00:00:00")

    response = client.get("/api/posts/sort")

    assert response.status_code == 200
    posts = response.json()
    assert [p["title"] for p in posts] == ["newest", "middle", "oldest"]
    dates = [p["date"] for p in posts]
    assert dates == sorted(dates, reverse=True)
