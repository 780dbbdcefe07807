"""
Tests for the /api/view endpoint.
"""
from supagate.views.engine import VIEW_DEFINITIONS_TABLE

PROJECT_TASKS = {
    "id": "v1",
    "name": "Project tasks",
    "is_public": True,
    "join_definition": [{
        "from": {"table": "projects", "field": "id"},
        "joinType": "left",
        "to": {"table": "tasks", "field": "project_id"},
    }],
    "allowed_filters": ["tasks.status"],
}


def test_run_view(api_client, fake_client):
    fake_client.respond(VIEW_DEFINITIONS_TABLE, data=[PROJECT_TASKS], count=1)
    fake_client.respond("projects", data=[{"id": 1, "tasks": [{"status": "done"}]}], count=1)

    response = api_client.get("/api/view/v1", params={"status": "done", "secret": "x", "page": "1", "pageSize": "10"})

    assert response.status_code == 200
    assert response.json() == {"data": [{"id": 1, "tasks": [{"status": "done"}]}], "count": 1}
    query = fake_client.last_query("projects")
    assert query.calls[0][1] == ("*,tasks(*)",)
    assert query.filter_calls() == [("eq", "tasks.status", "done"), ("range", 0, 9)]


def test_unknown_view(api_client):
    response = api_client.get("/api/view/missing")

    assert response.status_code == 404
    assert response.json()["kind"] == "ViewNotFound"
    assert response.json()["context"] == "View Engine"


def test_right_join_view(api_client, fake_client):
    definition = dict(PROJECT_TASKS, join_definition=[dict(PROJECT_TASKS["join_definition"][0], joinType="right")])
    fake_client.respond(VIEW_DEFINITIONS_TABLE, data=[definition], count=1)

    response = api_client.get("/api/view/v1")

    assert response.status_code == 400
    assert response.json()["kind"] == "UnsupportedJoinType"
    assert response.json()["message"] == "Right joins are not supported"


def test_malformed_view(api_client, fake_client):
    fake_client.respond(VIEW_DEFINITIONS_TABLE, data=[{"id": "v1", "join_definition": []}], count=1)

    response = api_client.get("/api/view/v1")

    assert response.status_code == 500
    assert response.json()["kind"] == "InvalidViewDefinition"
