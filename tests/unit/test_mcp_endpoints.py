"""Tests for the HTTP transport."""
import json

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import OperationFailure

from mongo_mcp.api.app import create_app

@pytest.fixture
def app(make_context):
    """Create a test app over the fake database."""
    return create_app(make_context())

@pytest.fixture
def client(app):
    """Create a test client."""
    with TestClient(app) as client:
        yield client

def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "server": "mcp/mongodb", "database": "test_db"}

def test_shutdown_closes_connection(app, fake_client):
    with TestClient(app):
        assert app.state.mongo_context.is_ready
    assert fake_client.close_calls == 1

def test_list_resources(client, fake_db):
    fake_db.add_collection("products", [{"color": "#000", "price": 10}])

    response = client.get("/mcp/resources")

    assert response.status_code == 200
    [resource] = response.json()["resources"]
    assert resource["uri"] == "mongodb://localhost:27017/test_db/products/schema"
    assert resource["mimeType"] == "application/json"
    assert resource["name"] == "products"
    assert json.loads(resource["properties"]) == {"color": "string", "price": "number"}

def test_read_resource(client, fake_db):
    fake_db.add_collection("products", [{"color": "#000"}], aggregate_result=[
        {"_id": "color", "types": ["string"], "count": 1},
    ])
    uri = "mongodb://localhost:27017/test_db/products/schema"

    response = client.post("/mcp/resources/read", json={"uri": uri})

    assert response.status_code == 200
    [contents] = response.json()["contents"]
    assert contents["uri"] == uri
    assert contents["mimeType"] == "application/json"
    assert json.loads(contents["text"]) == [
        {"field_name": "color", "observed_types": ["string"], "occurrence_count": 1}
    ]

@pytest.mark.parametrize("uri, status_code", [
    ("mongodb://localhost:27017/other_db/products/schema", 400),
    ("mongodb://localhost:27017/test_db/products", 400),
    ("mongodb://localhost:27017/test_db/ghosts/schema", 404),
])
def test_read_resource_errors(client, uri, status_code):
    response = client.post("/mcp/resources/read", json={"uri": uri})
    assert response.status_code == status_code

def test_list_tools(client):
    response = client.get("/mcp/tools")
    assert response.status_code == 200
    tools = response.json()["tools"]
    assert [tool["name"] for tool in tools] == ["find", "findOne", "aggregate"]
    assert all("inputSchema" in tool for tool in tools)

def test_call_tool(client, fake_db):
    fake_db.add_collection("products", [{"color": "#000", "category": "shoes"}])

    response = client.post("/mcp/tools/call", json={
        "name": "findOne",
        "arguments": {"collection": "products", "query": {"category": "shoes"}},
    })

    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "findOne"
    assert body["content"][0]["type"] == "text"
    assert json.loads(body["content"][0]["text"]) == {"color": "#000", "category": "shoes"}

@pytest.mark.parametrize("payload, detail", [
    ({"name": "find", "arguments": {}}, "Collection name is required."),
    ({"name": "find"}, "Invalid arguments format"),
    ({"name": "count", "arguments": {"collection": "products"}}, "Unknown tool: count"),
])
def test_call_tool_validation_errors(client, fake_db, payload, detail):
    response = client.post("/mcp/tools/call", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == detail
    assert fake_db.total_calls() == 0

def test_call_tool_database_error(client, fake_db):
    fake_db.add_collection("products", aggregate_error=OperationFailure("Unrecognized pipeline stage name: '$bogus'"))
    response = client.post("/mcp/tools/call", json={
        "name": "aggregate",
        "arguments": {"collection": "products", "pipeline": [{"$bogus": {}}]},
    })
    assert response.status_code == 500
    assert "Unrecognized pipeline stage name" in response.json()["detail"]

def test_requests_before_connect_are_rejected(app):
    # Without the context manager the startup event never runs
    client = TestClient(app)
    response = client.post("/mcp/tools/call", json={"name": "find", "arguments": {"collection": "products"}})
    assert response.status_code == 503
    assert response.json()["detail"] == "Database connection not initialized."
