import json
import threading
import urllib.error
import urllib.request

import pytest

from vzporedni.rest import RestClient, RestError, make_server, run_client
from vzporedni.storage import Todo, TodoNotFound, TodoStorage


@pytest.fixture
def served():
    storage = TodoStorage()
    server = make_server(("127.0.0.1", 0), storage)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    yield storage, f"http://{host}:{port}"
    server.shutdown()
    server.server_close()
    thread.join()


def test_run_client_sequence(served):
    storage, root = served
    reads = run_client(root + "/todos/")
    assert reads[0] == {"predavanja": Todo("predavanja", False)}
    assert reads[1] == {
        "predavanja": Todo("predavanja", False),
        "vaje": Todo("vaje", False),
    }
    assert reads[2] == {"predavanja": Todo("predavanja", True)}
    assert storage.read(Todo()) == reads[2]


def test_create_reaches_storage(served):
    storage, root = served
    RestClient(root + "/todos/").create(Todo("task", True))
    assert storage.read(Todo("task")) == {"task": Todo("task", True)}


def test_read_all_at_todos_without_slash(served):
    storage, root = served
    storage.create(Todo("a", False))
    with urllib.request.urlopen(root + "/todos") as response:
        payload = json.loads(response.read())
    assert payload == {"a": {"task": "a", "completed": False}}


def test_read_missing_is_server_error(served):
    _, root = served
    with pytest.raises(RestError) as info:
        RestClient(root + "/todos/").read("missing")
    assert info.value.status == 500


def test_update_missing_raises_not_found(served):
    _, root = served
    with pytest.raises(TodoNotFound):
        RestClient(root + "/todos/").update("missing", Todo("missing", True))


def test_delete_missing_is_server_error(served):
    _, root = served
    with pytest.raises(RestError) as info:
        RestClient(root + "/todos/").delete("missing")
    assert info.value.status == 500


def test_delete_removes(served):
    storage, root = served
    storage.create(Todo("x", False))
    client = RestClient(root + "/todos/")
    client.delete("x")
    assert client.read("") == {}


def test_invalid_body_is_server_error(served):
    _, root = served
    request = urllib.request.Request(root + "/todos", data=b"not json", method="POST")
    with pytest.raises(urllib.error.HTTPError) as info:
        urllib.request.urlopen(request)
    assert info.value.code == 500
    info.value.close()


def test_home_page(served):
    _, root = served
    with urllib.request.urlopen(root + "/") as response:
        text = response.read().decode("utf-8")
    assert text.startswith("RESTful CRUD server.\n\nUsage:\n")
    assert "/todos/" in text