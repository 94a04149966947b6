# tests/test_feedback.py


def test_create_and_list_feedback(client):
    r = client.post("/api/feedback", json={"userId": 1, "ticketId": 3, "rating": 5, "comment": "Fast fix"})
    assert r.status_code == 201
    created = r.json()
    assert created["id"] == 1
    assert created["ticketId"] == 3

    client.post("/api/feedback", json={"userId": 2, "rating": 3})

    assert len(client.get("/api/feedback").json()) == 2
    assert [f["id"] for f in client.get("/api/feedback/user/1").json()] == [1]
    assert [f["id"] for f in client.get("/api/feedback/ticket/3").json()] == [1]
    assert client.get("/api/feedback/user/2").json()[0]["comment"] == ""


def test_feedback_validation(client):
    assert client.post("/api/feedback", json={"rating": 4}).status_code == 400
    assert client.post("/api/feedback", json={"userId": 1}).status_code == 400
    assert client.post("/api/feedback", json={"userId": 1, "rating": 9}).status_code == 400


def test_delete_feedback(client):
    client.post("/api/feedback", json={"userId": 1, "rating": 4})
    r = client.delete("/api/feedback/1")
    assert r.status_code == 200
    assert r.json()["message"] == "Feedback deleted successfully"
    assert client.delete("/api/feedback/1").status_code == 404
    assert client.get("/api/feedback").json() == []
