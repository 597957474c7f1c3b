"""HTTP surface tests against the Flask test client (TestingConfig, seeded console)."""


def _webhook(remote_jid="5511999999999@s.whatsapp.net", text="Oi", push_name="Ana"):
    return {
        "event": "messages.upsert",
        "data": {
            "key": {"remoteJid": remote_jid, "fromMe": False},
            "pushName": push_name,
            "message": {"conversation": text},
        },
    }


def test_health_endpoints(client):
    assert client.get("/health").get_json()["status"] == "healthy"
    assert client.get("/health/live").status_code == 200
    ready = client.get("/health/ready")
    assert ready.status_code == 200
    assert ready.get_json()["checks"]["storage"] is True
    assert ready.get_json()["checks"]["restored"] is True


def test_webhook_routes_known_contact_to_seed_chat(client):
    response = client.post("/webhook", json=_webhook())

    assert response.status_code == 200
    body = response.get_json()
    assert body["chat_id"] == "chat1"
    assert body["created"] is False
    chat = client.get("/api/chats/chat1").get_json()
    assert chat["messages"][-1]["text"] == "Oi"
    assert chat["unreadCount"] == 2


def test_webhook_opens_chat_for_new_contact(client):
    response = client.post("/webhook", json=_webhook(remote_jid="5521988887777@s.whatsapp.net", push_name="Rui"))

    body = response.get_json()
    assert body["created"] is True
    chats = client.get("/api/chats").get_json()["chats"]
    assert chats[0]["id"] == body["chat_id"]
    assert chats[0]["customerName"] == "Rui"
    assert chats[0]["customerPhone"] == "+55 21 98888-7777"
    assert chats[0]["unreadCount"] == 1


def test_webhook_rejects_malformed_payload(client):
    before = client.get("/api/chats").get_json()["chats"]

    response = client.post("/webhook", json={"event": "messages.upsert"})

    assert response.status_code == 400
    assert response.get_json()["status"] == "error"
    assert client.get("/api/chats").get_json()["chats"] == before


def test_send_message_schedules_reply_in_same_chat(client, deferred_executor, operator_headers):
    response = client.post("/api/chats/chat1/messages", json={"text": "Hello!"}, headers=operator_headers)

    assert response.status_code == 201
    assert response.get_json()["senderId"] == "u2"
    assert client.get("/api/chats/chat1/composing").get_json()["composing"] is True

    deferred_executor.run_pending()

    chat = client.get("/api/chats/chat1").get_json()
    assert chat["messages"][-1]["isCustomer"] is True
    assert chat["messages"][-1]["text"] == "Thanks!"
    assert client.get("/api/chats/chat1/composing").get_json()["composing"] is False


def test_send_message_requires_operator_header(client):
    response = client.post("/api/chats/chat1/messages", json={"text": "Hello!"})

    assert response.status_code == 400


def test_send_to_resolved_chat_conflicts(client, deferred_executor, operator_headers):
    client.post("/api/chats/chat1/status", json={"status": "resolved"})

    response = client.post("/api/chats/chat1/messages", json={"text": "Hello!"}, headers=operator_headers)

    assert response.status_code == 409
    assert deferred_executor.pending_count == 0


def test_send_empty_message_is_rejected(client, operator_headers):
    response = client.post("/api/chats/chat1/messages", json={"text": ""}, headers=operator_headers)

    assert response.status_code == 400


def test_unknown_chat_returns_404(client, operator_headers):
    assert client.get("/api/chats/nope").status_code == 404
    assert client.post("/api/chats/nope/messages", json={"text": "x"}, headers=operator_headers).status_code == 404


def test_select_and_clear_focus(client):
    selected = client.post("/api/chats/chat1/select").get_json()
    assert selected["unreadCount"] == 0
    assert client.get("/api/chats").get_json()["focusedChatId"] == "chat1"

    client.post("/webhook", json=_webhook())
    assert client.get("/api/chats/chat1").get_json()["unreadCount"] == 0

    client.delete("/api/chats/focus")
    client.post("/webhook", json=_webhook())
    assert client.get("/api/chats/chat1").get_json()["unreadCount"] == 1


def test_list_chats_filters_by_status(client):
    client.post("/api/chats/chat1/status", json={"status": "resolved"})

    assert client.get("/api/chats?status=active").get_json()["chats"] == []
    assert len(client.get("/api/chats?status=resolved").get_json()["chats"]) == 1
    assert client.get("/api/chats?status=archived").status_code == 400


def test_patch_crm_fields(client):
    response = client.patch("/api/chats/chat1", json={"customerValue": 250})

    assert response.status_code == 200
    assert response.get_json()["customerValue"] == 250.0
    assert response.get_json()["customerName"] == "Example Customer"
    assert client.patch("/api/chats/chat1", json={"bogus": 1}).status_code == 400


def test_numeric_crm_phone_is_rejected_and_routing_keeps_working(client):
    response = client.patch("/api/chats/chat1", json={"customerPhone": 5511988881111})

    assert response.status_code == 400
    assert client.get("/api/chats/chat1").get_json()["customerPhone"] == "+55 11 99999-9999"

    routed = client.post("/webhook", json=_webhook(remote_jid="5521977772222@s.whatsapp.net", push_name="Rui"))

    assert routed.status_code == 200
    assert routed.get_json()["created"] is True


def test_scheduled_messages_lifecycle(client, operator_headers):
    payload = {
        "customerName": "Ana",
        "customerPhone": "+55 11 90000-0000",
        "text": "Reminder",
        "scheduledDate": "2030-01-01T10:00:00Z",
    }

    created = client.post("/api/scheduled-messages", json=payload, headers=operator_headers)
    assert created.status_code == 201
    item = created.get_json()
    assert item["status"] == "pending"
    assert item["createdBy"] == "u2"

    listed = client.get("/api/scheduled-messages").get_json()["scheduledMessages"]
    assert [entry["id"] for entry in listed] == [item["id"]]

    assert client.delete(f"/api/scheduled-messages/{item['id']}").status_code == 200
    assert client.delete(f"/api/scheduled-messages/{item['id']}").status_code == 404


def test_scheduled_message_with_bad_date_is_rejected(client, operator_headers):
    payload = {"customerName": "Ana", "customerPhone": "1", "text": "x", "scheduledDate": "next week"}

    assert client.post("/api/scheduled-messages", json=payload, headers=operator_headers).status_code == 400


def test_register_and_manage_tenant(client):
    registered = client.post("/api/register", json={
        "companyName": "Beta Ltd",
        "name": "Bea",
        "email": "bea@beta.com",
        "password": "secret",
    })
    assert registered.status_code == 201
    company_id = registered.get_json()["company"]["id"]
    assert "password" not in registered.get_json()["user"]

    agent = client.post(f"/api/companies/{company_id}/users", json={"name": "Ana", "email": "ana@beta.com"})
    assert agent.status_code == 201
    agent_id = agent.get_json()["id"]

    assert client.put(f"/api/users/{agent_id}/password", json={"password": "n3w"}).status_code == 200
    avatar = client.put(f"/api/users/{agent_id}/avatar", json={"avatarUrl": "https://example.com/a.png"})
    assert avatar.get_json()["avatarUrl"] == "https://example.com/a.png"

    meta = client.put(f"/api/companies/{company_id}/meta-config", json={"phoneNumberId": "123"})
    assert meta.get_json()["metaConfig"]["phoneNumberId"] == "123"

    users = client.get(f"/api/companies/{company_id}/users").get_json()["users"]
    assert len(users) == 2

    assert client.delete(f"/api/users/{agent_id}").status_code == 200
    assert client.delete(f"/api/companies/{company_id}").status_code == 200
    assert client.get(f"/api/companies/{company_id}/users").status_code == 404


def test_company_user_limit_is_enforced(client):
    for i in range(14):
        response = client.post("/api/companies/c1/users", json={"name": f"Agent {i}", "email": f"a{i}@x"})
        assert response.status_code == 201

    response = client.post("/api/companies/c1/users", json={"name": "One too many", "email": "extra@x"})

    assert response.status_code == 409


def test_dashboard_counts(client, deferred_executor, operator_headers):
    client.post("/api/chats/chat1/messages", json={"text": "Hello!"}, headers=operator_headers)

    summary = client.get("/api/dashboard").get_json()

    assert summary["totalChats"] == 1
    assert summary["activeChats"] == 1
    assert {"userId": "u2", "name": "Carlos Manager", "messagesSent": 1} in summary["operators"]


def test_mutations_are_persisted(client, kv_store, operator_headers):
    client.post("/api/chats/chat1/messages", json={"text": "Saved?"}, headers=operator_headers)

    assert "Saved?" in kv_store.get("chatdesk:chats")
