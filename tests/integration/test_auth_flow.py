"""Integration test: register, reject duplicates, log in, post.

Runs the real hashing and token services through the full request
pipeline; only the document store is in memory.
"""

import bcrypt
import jwt


def test_register_login_and_post(client, fake_db, test_settings):
    form = {
        "firstName": "A",
        "lastName": "B",
        "email": "a@x.com",
        "password": "p1",
        "picturePath": "",
    }

    registered = client.post("/auth/register", data=form)
    assert registered.status_code == 201
    user_id = registered.json()["_id"]

    stored = fake_db["users"].documents[0]
    assert stored["password"] != "p1"
    assert bcrypt.checkpw(b"p1", stored["password"].encode("utf-8"))

    duplicate = client.post("/auth/register", data=form)
    assert duplicate.status_code == 400
    assert len(fake_db["users"].documents) == 1

    wrong = client.post("/auth/login", json={"email": "a@x.com", "password": "p2"})
    assert wrong.status_code == 400
    assert wrong.json() == {"message": "Invalid credentials"}

    login = client.post("/auth/login", json={"email": "a@x.com", "password": "p1"})
    assert login.status_code == 200
    body = login.json()
    claims = jwt.decode(body["token"], test_settings.jwt_secret, algorithms=["HS256"])
    assert claims["id"] == user_id
    assert claims["exp"] - claims["iat"] == 3600
    assert body["user"]["email"] == "a@x.com"

    feed = client.post(
        "/posts",
        data={"description": "hello"},
        headers={"Authorization": f"Bearer {body['token']}"},
    )
    assert feed.status_code == 201
    assert [p["description"] for p in feed.json()] == ["hello"]


def test_login_email_is_case_insensitive(client):
    client.post(
        "/auth/register",
        data={
            "firstName": "A",
            "lastName": "B",
            "email": "Mixed@X.com",
            "password": "p1",
        },
    )

    response = client.post(
        "/auth/login", json={"email": "mixed@x.com", "password": "p1"}
    )

    assert response.status_code == 200
