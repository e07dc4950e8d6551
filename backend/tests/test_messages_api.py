from __future__ import annotations

from saturday.models import Conversation


def test_direct_message_reuses_conversation(client, db, alice, bob, school, login_as):
    login_as(alice, school)
    first = client.post("/api/messages/send", json={"recipient_id": bob.id, "content": "hey"})
    assert first.status_code == 201
    second = client.post("/api/messages/send", json={"recipient_id": bob.id, "content": "  you around?  "})
    assert second.status_code == 201
    assert first.json()["conversation_id"] == second.json()["conversation_id"]
    assert second.json()["content"] == "you around?"
    assert db.query(Conversation).count() == 1

    login_as(bob, school)
    conversations = client.get("/api/conversations").json()
    assert len(conversations) == 1
    assert conversations[0]["participant_ids"] == sorted([alice.id, bob.id])

    messages = client.get(f"/api/conversations/{conversations[0]['id']}/messages").json()
    assert [m["content"] for m in messages] == ["hey", "you around?"]
    assert messages[0]["sender_id"] == alice.id


def test_messages_after_cursor(client, alice, bob, school, login_as):
    login_as(alice, school)
    first = client.post("/api/messages/send", json={"recipient_id": bob.id, "content": "one"}).json()
    client.post("/api/messages/send", json={"recipient_id": bob.id, "content": "two"})
    conversation_id = first["conversation_id"]
    messages = client.get(
        f"/api/conversations/{conversation_id}/messages",
        params={"after": first["created_at"]},
    ).json()
    assert [m["content"] for m in messages] == ["two"]


def test_conversation_is_private_to_participants(client, alice, bob, make_user, school, login_as):
    eve = make_user("eve", school)
    login_as(alice, school)
    conversation = client.post("/api/conversations", json={"participant_ids": [bob.id], "title": "Saturday"}).json()
    assert conversation["participant_ids"] == sorted([alice.id, bob.id])

    login_as(eve, school)
    assert client.get(f"/api/conversations/{conversation['id']}/messages").status_code == 404
    response = client.post(f"/api/conversations/{conversation['id']}/messages", json={"content": "hi"})
    assert response.status_code == 404
    assert client.get("/api/conversations").json() == []


def test_cannot_message_other_schools_or_self(client, alice, make_user, other_school, school, login_as):
    outsider = make_user("mallory", other_school)
    login_as(alice, school)
    assert client.post("/api/messages/send", json={"recipient_id": outsider.id, "content": "hi"}).status_code == 404
    assert client.post("/api/messages/send", json={"recipient_id": alice.id, "content": "hi"}).status_code == 400
    assert client.post("/api/conversations", json={"participant_ids": [outsider.id]}).status_code == 404
    assert client.post("/api/conversations", json={"participant_ids": [alice.id]}).status_code == 400


def test_blank_message_rejected(client, alice, bob, school, login_as):
    login_as(alice, school)
    assert client.post("/api/messages/send", json={"recipient_id": bob.id, "content": "   "}).status_code == 422
