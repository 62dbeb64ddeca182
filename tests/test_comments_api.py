from datetime import datetime

API = "/api/v1"


def test_comment_flow(client, admin_headers, make_user, make_ticket):
    _, dana = make_user("dana@example.com")
    ticket = make_ticket()
    url = f"{API}/tickets/{ticket['id']}/comments"

    resp = client.post(url, json={"body": "Still broken this morning"}, headers=dana)
    assert resp.status_code == 201
    comment = resp.json()
    assert comment["author"] == "dana@example.com"
    assert comment["ticketId"] == ticket["id"]
    assert comment["internal"] is False

    resp = client.post(url, json={"body": "Replacement ordered", "internal": True}, headers=admin_headers)
    assert resp.status_code == 201

    staff_view = client.get(url, headers=admin_headers).json()
    assert [c["body"] for c in staff_view] == ["Still broken this morning", "Replacement ordered"]

    reporter_view = client.get(url, headers=dana).json()
    assert [c["body"] for c in reporter_view] == ["Still broken this morning"]

    stored = client.get(f"{API}/tickets/{ticket['id']}", headers=admin_headers).json()
    assert stored["audit"] == []
    assert datetime.fromisoformat(stored["updatedAt"]) > datetime.fromisoformat(ticket["updatedAt"])


def test_comment_rules(client, admin_headers, make_user, make_ticket):
    _, dana = make_user("dana@example.com")
    ticket = make_ticket()
    url = f"{API}/tickets/{ticket['id']}/comments"

    assert client.post(url, json={"body": "Anyone?"}).status_code == 401
    assert client.post(url, json={"body": "   "}, headers=dana).status_code == 400
    assert client.post(url, json={"body": "psst", "internal": True}, headers=dana).status_code == 403
    assert client.post(f"{API}/tickets/missing/comments", json={"body": "Hi"}, headers=dana).status_code == 404
    assert client.get(f"{API}/tickets/missing/comments", headers=dana).status_code == 404


def test_archived_ticket_rejects_comments(client, admin_headers, make_ticket):
    ticket = make_ticket()
    client.patch(f"{API}/tickets/{ticket['id']}", json={"archived": True}, headers=admin_headers)

    resp = client.post(f"{API}/tickets/{ticket['id']}/comments", json={"body": "Late reply"}, headers=admin_headers)
    assert resp.status_code == 423


def test_deleting_ticket_removes_comments(client, admin_headers, make_ticket):
    ticket = make_ticket()
    url = f"{API}/tickets/{ticket['id']}/comments"
    client.post(url, json={"body": "First"}, headers=admin_headers)

    client.delete(f"{API}/tickets/{ticket['id']}", headers=admin_headers)
    assert client.get(url, headers=admin_headers).status_code == 404
