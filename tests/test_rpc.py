import contextlib
import threading

import pytest

from vzporedni.rpc import RpcClient, RpcError, make_server, run_client
from vzporedni.storage import Todo, TodoNotFound, TodoStorage


@contextlib.contextmanager
def running(use_http, storage):
    server = make_server(("127.0.0.1", 0), use_http, storage)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server.server_address[:2]
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.mark.parametrize("use_http", [True, False])
def test_client_sequence(use_http):
    storage = TodoStorage()
    with running(use_http, storage) as address:
        reads = run_client(address, use_http)
    assert reads == [
        {"predavanja": Todo("predavanja", False)},
        {"predavanja": Todo("predavanja", False), "vaje": Todo("vaje", False)},
        {"predavanja": Todo("predavanja", True)},
    ]
    assert storage.read(Todo()) == {"predavanja": Todo("predavanja", True)}


@pytest.mark.parametrize("use_http", [True, False])
def test_missing_todo_raises_not_found(use_http):
    with running(use_http, TodoStorage()) as address:
        with RpcClient(address, use_http) as client:
            with pytest.raises(TodoNotFound):
                client.call("TodoStorage.Update", Todo("izpit", True))
            with pytest.raises(TodoNotFound):
                client.call("TodoStorage.Read", Todo("izpit"))


@pytest.mark.parametrize("use_http", [True, False])
def test_unknown_method_raises(use_http):
    with running(use_http, TodoStorage()) as address:
        with RpcClient(address, use_http) as client:
            with pytest.raises(RpcError):
                client.call("TodoStorage.Archive", Todo("vaje"))


@pytest.mark.parametrize("use_http", [True, False])
def test_calls_change_shared_storage(use_http):
    storage = TodoStorage()
    with running(use_http, storage) as address:
        with RpcClient(address, use_http) as client:
            assert client.call("TodoStorage.Create", Todo("vaje", False)) is None
            client.call("TodoStorage.Update", Todo("vaje", True))
    assert storage.read(Todo("vaje")) == {"vaje": Todo("vaje", True)}


def test_make_server_creates_storage_when_none_given():
    with running(False, None) as address:
        with RpcClient(address, False) as client:
            client.call("TodoStorage.Create", Todo("vaje", False))
            assert client.call("TodoStorage.Read", Todo()) == {"vaje": Todo("vaje", False)}