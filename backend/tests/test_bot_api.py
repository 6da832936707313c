"""
Tests for the bot transport endpoints.
"""

from fastapi.testclient import TestClient


ADDRESS = "123 Main St, Springfield, IL 62701"


def post_message(client: TestClient, text: str, sender_id="user-1", conversation_id="conv-1"):
    return client.post(
        "/bot/messages",
        json={"sender_id": sender_id, "conversation_id": conversation_id, "text": text},
    )


class TestHealth:
    def test_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestMessageEndpoint:
    """Test the inbound message endpoint."""

    def test_first_message_is_taken_as_name(self, client: TestClient):
        response = post_message(client, "Jane")

        assert response.status_code == 200
        body = response.json()
        assert body["step"] == "ask_address"
        assert body["failure"] is None
        assert body["messages"][0] == {
            "type": "text",
            "text": "Oh, hey Jane. Nice to see you here!",
            "card": None,
        }

    def test_validation_failure_is_reported(self, client: TestClient):
        response = post_message(client, "John3")

        body = response.json()
        assert body["step"] == "ask_name"
        assert body["failure"] == "validation"

    def test_full_order_over_http(self, client: TestClient, mailer):
        for text in ("Jane", ADDRESS, "jane@example.com"):
            assert post_message(client, text).status_code == 200

        picked = post_message(client, "dune").json()
        assert picked["step"] == "confirm_book"
        card = picked["messages"][0]
        assert card["type"] == "card"
        assert card["card"]["title"] == "Dune"
        assert card["card"]["actions"] == ["buy"]

        assert post_message(client, "buy").json()["step"] == "summary"

        summary = post_message(client, "yes").json()
        assert summary["step"] == "ask_name"
        assert "jane@example.com" in summary["messages"][0]["text"]
        assert len(mailer.sent) == 1

    def test_missing_sender_is_rejected(self, client: TestClient):
        response = client.post("/bot/messages", json={"conversation_id": "conv-1", "text": "hi"})
        assert response.status_code == 422


class TestMembersAndDialogEndpoints:
    """Test the welcome and dialog endpoints."""

    def test_members_added_welcomes_everyone_but_the_bot(self, client: TestClient):
        response = client.post(
            "/bot/members",
            json={"conversation_id": "conv-1", "members_added": ["user-1", "bookbot"]},
        )

        assert response.status_code == 200
        messages = response.json()["messages"]
        assert [m["text"] for m in messages] == ["Hello and welcome! What is your name?"]

    def test_explicit_bot_id(self, client: TestClient):
        response = client.post(
            "/bot/members",
            json={"conversation_id": "conv-1", "members_added": ["user-1", "bookbot"], "bot_id": "user-1"},
        )

        assert len(response.json()["messages"]) == 1

    def test_dialog_saves_state(self, client: TestClient, store):
        post_message(client, "Jane")
        before = store.get("user:user-1")

        response = client.post("/bot/dialog", json={"sender_id": "user-1", "conversation_id": "conv-1"})

        assert response.status_code == 200
        assert response.json() == {"status": "saved"}
        assert store.get("user:user-1") == before


class TestWebSocketChat:
    """Test the live chat socket."""

    def test_chat_over_websocket(self, client: TestClient):
        with client.websocket_connect("/ws/chat/conv-9?sender_id=user-9") as ws:
            assert ws.receive_json() == {"type": "text", "text": "Hello and welcome! What is your name?"}

            ws.send_json({"type": "ping"})
            assert ws.receive_json() == {"type": "pong"}

            ws.send_json({"type": "message", "text": "Jane"})
            assert ws.receive_json()["text"] == "Oh, hey Jane. Nice to see you here!"
            assert ws.receive_json()["type"] == "text"
            assert ws.receive_json() == {"type": "turn", "step": "ask_address", "failure": None}

    def test_reconnect_resumes_instead_of_welcoming(self, client: TestClient):
        with client.websocket_connect("/ws/chat/conv-9?sender_id=user-9") as ws:
            ws.receive_json()
            ws.send_json({"type": "message", "text": "Jane"})
            ws.receive_json()
            ws.receive_json()
            ws.receive_json()

        with client.websocket_connect("/ws/chat/conv-9?sender_id=user-9") as ws:
            assert ws.receive_json() == {
                "type": "text",
                "text": "What is your shipping address? Please include street address, city, state and zipcode.",
            }
