"""A REST server and client for the todo store, over plain HTTP with JSON bodies."""

from __future__ import annotations

import argparse
import json
import logging
import socket
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Sequence
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from vzporedni.storage import Todo, TodoNotFound, TodoStorage

DEFAULT_PORT = 9876
JSON_TYPE = "application/json"

_log = logging.getLogger(__name__)


class RestError(RuntimeError):
    """The server answered a request with an unsuccessful status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class _RestServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, address: tuple[str, int], storage: TodoStorage) -> None:
        self.storage = storage
        super().__init__(address, TodoRequestHandler)


class TodoRequestHandler(BaseHTTPRequestHandler):
    """Serves CRUD operations under ``/todos`` and a short usage page everywhere else."""

    server: _RestServer

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        _log.debug("%s - %s", self.address_string(), format % args)

    def _path(self) -> str:
        return urllib.parse.unquote(urllib.parse.urlsplit(self.path).path)

    @staticmethod
    def _is_todos(path: str) -> bool:
        return path == "/todos" or path.startswith("/todos/")

    def _send(self, status: int, body: bytes = b"", content_type: str = JSON_TYPE) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if body:
            self.wfile.write(body)

    def _home(self) -> None:
        host = self.headers.get("Host", "")
        text = (
            "RESTful CRUD server.\n\n"
            "Usage:\n"
            f"\thttp://{host}/todos/\n"
            "\tREST method params: {task: <string>, completed: <bool>}\n"
        )
        self._send(HTTPStatus.OK, text.encode("utf-8"), "text/plain; charset=utf-8")

    def _read_todo(self) -> Todo:
        length = int(self.headers.get("Content-Length") or 0)
        data = self.rfile.read(length) if length > 0 else b""
        return Todo.from_dict(json.loads(data))

    @staticmethod
    def _last_segment(path: str) -> str:
        return path.split("/")[-1]

    def do_GET(self) -> None:
        """Read one todo by the last path segment, or all of them at ``/todos``."""
        path = self._path()
        if not self._is_todos(path):
            self._home()
            return
        match = "" if path.endswith("todos") or path.endswith("todos/") else self._last_segment(path)
        try:
            found = self.server.storage.read(Todo(match, False))
        except TodoNotFound:
            self._send(HTTPStatus.INTERNAL_SERVER_ERROR)
            return
        body = json.dumps({task: todo.to_dict() for task, todo in found.items()})
        self._send(HTTPStatus.OK, body.encode("utf-8"))

    def do_POST(self) -> None:
        """Create the todo given in the body."""
        if not self._is_todos(self._path()):
            self._home()
            return
        try:
            todo = self._read_todo()
        except ValueError:
            self._send(HTTPStatus.INTERNAL_SERVER_ERROR)
            return
        self.server.storage.create(todo)
        self._send(HTTPStatus.OK)

    def do_PUT(self) -> None:
        """Replace the stored todo with the task given in the body."""
        if not self._is_todos(self._path()):
            self._home()
            return
        try:
            todo = self._read_todo()
        except ValueError:
            self._send(HTTPStatus.INTERNAL_SERVER_ERROR)
            return
        try:
            self.server.storage.update(todo)
        except TodoNotFound:
            self._send(HTTPStatus.NOT_FOUND)
            return
        self._send(HTTPStatus.OK)

    def do_DELETE(self) -> None:
        """Delete the todo named by the last path segment."""
        path = self._path()
        if not self._is_todos(path):
            self._home()
            return
        try:
            self.server.storage.delete(Todo(self._last_segment(path), False))
        except TodoNotFound:
            self._send(HTTPStatus.INTERNAL_SERVER_ERROR)
            return
        self._send(HTTPStatus.OK)


def make_server(address: tuple[str, int],
                storage: TodoStorage | None = None) -> ThreadingHTTPServer:
    """Bind a REST server for ``storage`` to ``address``; run it with ``serve_forever()``."""
    return _RestServer(address, TodoStorage() if storage is None else storage)


class RestClient:
    """Runs CRUD requests against ``base_url`` (such as ``http://host:9876/todos/``)."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url

    def _request(self, method: str, url: str, body: bytes | None, failure: str) -> bytes:
        request = urllib.request.Request(url, data=body, method=method)
        if body is not None:
            request.add_header("Content-Type", JSON_TYPE)
        try:
            with urllib.request.urlopen(request) as response:
                status = response.status
                data = response.read()
        except urllib.error.HTTPError as exc:
            status = exc.code
            data = b""
            exc.close()
        if status != HTTPStatus.OK:
            if status == HTTPStatus.NOT_FOUND and method == "PUT":
                raise TodoNotFound(failure)
            raise RestError(status, failure)
        return data

    def _url(self, task: str) -> str:
        return self.base_url + urllib.parse.quote(task)

    @staticmethod
    def _encode(todo: Todo) -> bytes:
        return json.dumps(todo.to_dict()).encode("utf-8")

    def create(self, todo: Todo) -> None:
        """Create ``todo`` on the server."""
        self._request("POST", self.base_url, self._encode(todo), "create not successful")

    def read(self, task: str = "") -> dict[str, Todo]:
        """The todo with ``task``, or all todos when ``task`` is empty."""
        data = self._request("GET", self._url(task), None, "read not successful")
        try:
            payload = json.loads(data)
            return {key: Todo.from_dict(value) for key, value in payload.items()}
        except (ValueError, AttributeError) as exc:
            raise RestError(HTTPStatus.OK, f"malformed reply: {data!r}") from exc

    def update(self, task: str, todo: Todo) -> None:
        """Replace the stored todo; raises TodoNotFound if the server does not have it."""
        self._request("PUT", self._url(task), self._encode(todo), "update not successful")

    def delete(self, task: str) -> None:
        """Delete the todo with ``task``."""
        self._request("DELETE", self._url(task), None, "delete not successful")


def run_client(base_url: str) -> list[dict[str, Todo]]:
    """Run the create/read/update/delete sequence; returns the three reads in order."""
    print(f"REST client connecting to {base_url}", flush=True)
    client = RestClient(base_url)
    reads: list[dict[str, Todo]] = []

    print("1. Create: post    : ", end="")
    client.create(Todo("predavanja", False))
    print("done")

    print("2. Read 1: get     : ", end="")
    reads.append(client.read("predavanja"))
    print(reads[-1], ": done")

    print("3. Create: req.post: ", end="")
    client.create(Todo("vaje", False))
    print("done")

    print("4. Read *: req.get : ", end="")
    reads.append(client.read(""))
    print(reads[-1], ": done")

    print("5. Update: req.put : ", end="")
    client.update("predavanja", Todo("predavanja", True))
    print("done")

    print("6. Delete: req.del : ", end="")
    client.delete("vaje")
    print("done")

    print("7. Read *: req.get : ", end="")
    reads.append(client.read(""))
    print(reads[-1], ": done")
    return reads


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="REST server and client for a todo store.")
    parser.add_argument("-s", "--server", default="", help="server URL")
    parser.add_argument("-p", "--port", type=int, default=DEFAULT_PORT, help="port number")
    args = parser.parse_args(argv)

    if args.server:
        run_client(f"http://{args.server}:{args.port}/todos/")
        return 0

    with make_server(("", args.port)) as server:
        print(f"REST server listening at {socket.gethostname()}:{args.port}", flush=True)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())