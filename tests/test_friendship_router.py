from sqlalchemy.exc import OperationalError

from friendgraph.api.auth.utils import create_access_token
from friendgraph.api.friends.service import FriendshipService

SEND_URL = "/api/v1/friendship-requests/send"
ACCEPT_URL = "/api/v1/friendship-requests/accept"
DECLINE_URL = "/api/v1/friendship-requests/decline"


def status_url(user_id: int) -> str:
    return f"/api/v1/friendship-requests/status/{user_id}"


def test_send_request(client, users, auth_headers, edges):
    alice, bob = users["alice"], users["bob"]

    response = client.post(SEND_URL, json={"friendUserId": bob.id}, headers=auth_headers(alice))

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert edges() == {(alice.id, bob.id, "requested")}


def test_send_accepts_snake_case_body(client, users, auth_headers):
    alice, bob = users["alice"], users["bob"]

    response = client.post(SEND_URL, json={"friend_user_id": bob.id}, headers=auth_headers(alice))

    assert response.status_code == 200


def test_send_to_unknown_user(client, users, auth_headers, edges):
    response = client.post(SEND_URL, json={"friendUserId": 9999}, headers=auth_headers(users["alice"]))

    assert response.status_code == 400
    assert response.json()["detail"] == "User not found"
    assert edges() == set()


def test_send_rejects_non_positive_id(client, users, auth_headers):
    response = client.post(SEND_URL, json={"friendUserId": 0}, headers=auth_headers(users["alice"]))

    assert response.status_code == 422


def test_requires_authentication(client, users):
    response = client.post(SEND_URL, json={"friendUserId": users["bob"].id})

    assert response.status_code == 401


def test_rejects_token_for_unknown_user(client, users):
    token = create_access_token({"sub": "mallory"})
    response = client.post(
        SEND_URL,
        json={"friendUserId": users["bob"].id},
        headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401


def test_accept_makes_friendship_mutual(client, users, auth_headers):
    alice, bob = users["alice"], users["bob"]
    client.post(SEND_URL, json={"friendUserId": bob.id}, headers=auth_headers(alice))

    response = client.post(ACCEPT_URL, json={"friendUserId": alice.id}, headers=auth_headers(bob))

    assert response.status_code == 200
    status = client.get(status_url(bob.id), headers=auth_headers(alice)).json()
    assert status == {
        "userId": bob.id,
        "outgoing": "accepted",
        "incoming": "accepted",
        "isMutual": True,
    }


def test_accept_without_pending_request(client, users, auth_headers):
    alice, bob = users["alice"], users["bob"]

    response = client.post(ACCEPT_URL, json={"friendUserId": alice.id}, headers=auth_headers(bob))

    assert response.status_code == 400
    assert response.json()["detail"] == "Friendship request is no longer pending"


def test_decline_then_send_again(client, users, auth_headers, edges):
    alice, bob = users["alice"], users["bob"]
    client.post(SEND_URL, json={"friendUserId": bob.id}, headers=auth_headers(alice))

    declined = client.post(DECLINE_URL, json={"friendUserId": alice.id}, headers=auth_headers(bob))
    assert declined.status_code == 200
    assert edges() == {(alice.id, bob.id, "declined")}

    resent = client.post(SEND_URL, json={"friendUserId": bob.id}, headers=auth_headers(alice))

    assert resent.status_code == 200
    assert edges() == {(alice.id, bob.id, "requested")}


def test_decline_twice(client, users, auth_headers):
    alice, bob = users["alice"], users["bob"]
    client.post(SEND_URL, json={"friendUserId": bob.id}, headers=auth_headers(alice))
    client.post(DECLINE_URL, json={"friendUserId": alice.id}, headers=auth_headers(bob))

    response = client.post(DECLINE_URL, json={"friendUserId": alice.id}, headers=auth_headers(bob))

    assert response.status_code == 400
    assert response.json()["detail"] == "Friendship request is no longer pending"


def test_storage_failure_returns_500(client, users, auth_headers, edges, monkeypatch):
    alice, bob = users["alice"], users["bob"]
    client.post(SEND_URL, json={"friendUserId": bob.id}, headers=auth_headers(alice))

    def lost_connection(self, *args, **kwargs):
        raise OperationalError("INSERT INTO friendships", {}, Exception("connection lost"))

    monkeypatch.setattr(FriendshipService, "_accept_reverse_edge", lost_connection)

    response = client.post(ACCEPT_URL, json={"friendUserId": alice.id}, headers=auth_headers(bob))

    assert response.status_code == 500
    assert edges() == {(alice.id, bob.id, "requested")}


def test_status_without_edges(client, users, auth_headers):
    alice, carol = users["alice"], users["carol"]

    response = client.get(status_url(carol.id), headers=auth_headers(alice))

    assert response.status_code == 200
    assert response.json() == {"userId": carol.id, "outgoing": None, "incoming": None, "isMutual": False}


def test_login_with_unknown_user(client):
    response = client.post("/api/v1/auth/login", data={"username": "nobody", "password": "whatever"})

    assert response.status_code == 401


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}


def test_send_to_self_creates_edge(client, users, auth_headers, edges):
    alice = users["alice"]

    response = client.post(SEND_URL, json={"friendUserId": alice.id}, headers=auth_headers(alice))

    assert response.status_code == 200
    assert edges() == {(alice.id, alice.id, "requested")}
