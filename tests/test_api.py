import pytest
from fastapi.testclient import TestClient

from main import app

HELLO = "1 begin\n2 int x\n3 set x 5\n4 print x x hi\n5 end"


@pytest.fixture
def client():
    return TestClient(app)


def test_run_returns_renders_and_screen(client):
    response = client.post("/api/run", json={"code": HELLO})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["state"] == "halted"
    assert data["renders"] == [{"row": 5, "col": 5, "text": "hi"}]
    assert data["screen"][5] == "     hi"
    assert data["variables"] == {"x": 5}
    assert data["error"] is None


def test_run_reports_parse_errors(client):
    data = client.post("/api/run", json={"code": "1 begin\n2 int x"}).json()
    assert data["success"] is False
    assert data["state"] == "invalid"
    assert data["error"]["kind"] == "MissingEnd"


def test_run_keeps_renders_before_a_runtime_error(client):
    code = "1 begin\n2 int x\n3 set x 1\n4 print x x ok\n5 div x 0\n6 end"
    data = client.post("/api/run", json={"code": code}).json()
    assert data["success"] is False
    assert data["state"] == "error"
    assert data["error"]["kind"] == "DivisionByZero"
    assert data["error"]["line_number"] == 5
    assert data["renders"] == [{"row": 1, "col": 1, "text": "ok"}]


def test_endless_program_is_stopped(client):
    data = client.post("/api/run", json={"code": "1 begin\n2 goto 1\n3 end"}).json()
    assert data["error"]["kind"] == "StepLimitExceeded"


def test_compile(client):
    data = client.post("/api/compile", json={"code": HELLO}).json()
    assert data["success"] is True
    assert data["program"]["end_line"] == 5
    assert data["program"]["commands"][2] == {"line_number": 3, "kind": "set", "operands": ["x", "5"]}


def test_compile_error(client):
    data = client.post("/api/compile", json={"code": "1 begin\n2 int x\n3 int x\n4 end"}).json()
    assert data["success"] is False
    assert data["errors"][0]["kind"] == "DuplicateVariable"
    assert data["errors"][0]["line_number"] == 3


def test_examples_all_run(client):
    examples = client.get("/api/examples").json()
    assert "hello" in examples
    for example in examples.values():
        data = client.post("/api/run", json={"code": example["code"]}).json()
        assert data["success"] is True, example["name"]


def test_websocket_streams_renders(client):
    with client.websocket_connect("/api/execute-interactive") as websocket:
        websocket.send_json({"code": HELLO})
        assert websocket.receive_json()["type"] == "program"
        assert websocket.receive_json() == {"type": "execution_started"}
        assert websocket.receive_json() == {"type": "render", "row": 5, "col": 5, "text": "hi"}
        finished = websocket.receive_json()
    assert finished["type"] == "execution_finished"
    assert finished["success"] is True
    assert finished["variables"] == {"x": 5}


def test_websocket_reports_runtime_error(client):
    with client.websocket_connect("/api/execute-interactive") as websocket:
        websocket.send_json({"code": "1 begin\n2 int x\n3 add x 1\n4 end"})
        websocket.receive_json()
        websocket.receive_json()
        finished = websocket.receive_json()
    assert finished["success"] is False
    assert finished["error"]["kind"] == "UnsetVariable"


def test_websocket_reports_parse_error(client):
    with client.websocket_connect("/api/execute-interactive") as websocket:
        websocket.send_json({"code": "1 int x\n2 end"})
        finished = websocket.receive_json()
    assert finished["success"] is False
    assert finished["error"]["kind"] == "MissingBegin"
