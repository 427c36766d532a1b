"""
API tests for the chat relay.
"""

from magus.core.exceptions import ChatBackendError


async def test_chat_requires_session(client):
    response = await client.post("/api/chat", json={"prompt": "hello"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


async def test_chat_stub_reply(client, settings, session_token):
    client.cookies.set(settings.SESSION_COOKIE_NAME, session_token())

    response = await client.post("/api/chat", json={"prompt": "hello"})

    assert response.status_code == 200
    assert response.json() == {"message": "Thank you"}


async def test_chat_requires_prompt(client, settings, session_token):
    client.cookies.set(settings.SESSION_COOKIE_NAME, session_token())

    for body in ({}, {"prompt": ""}, {"prompt": "   "}):
        response = await client.post("/api/chat", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Prompt is required"}


async def test_chat_relays_to_backend(client, settings, session_token, use_fake_chat):
    client.cookies.set(settings.SESSION_COOKIE_NAME, session_token())

    response = await client.post("/api/chat", json={"prompt": "What is 2+2?"})

    assert response.status_code == 200
    assert response.json() == {"message": "Hello from the model"}
    assert use_fake_chat.prompts == ["What is 2+2?"]


async def test_chat_backend_failure(client, settings, session_token, use_fake_chat, monkeypatch):
    async def failing(prompt):
        raise ChatBackendError()

    monkeypatch.setattr(use_fake_chat, "generate_reply", failing)
    client.cookies.set(settings.SESSION_COOKIE_NAME, session_token())

    response = await client.post("/api/chat", json={"prompt": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process message"}


async def test_chat_with_unknown_backend_answers_error_body(client, settings, session_token, monkeypatch):
    monkeypatch.setattr(settings, "CHAT_BACKEND", "bogus")
    client.cookies.set(settings.SESSION_COOKIE_NAME, session_token())

    response = await client.post("/api/chat", json={"prompt": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Unknown chat backend: bogus"}
