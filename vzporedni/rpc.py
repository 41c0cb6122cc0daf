"""Remote calls on a todo store, over XML-RPC on HTTP or JSON lines on plain TCP."""

from __future__ import annotations

import argparse
import json
import socket
import socketserver
import threading
import xmlrpc.client
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from xmlrpc.server import SimpleXMLRPCServer

from vzporedni.storage import Todo, TodoNotFound, TodoStorage

SERVICE = "TodoStorage"
METHODS = ("Create", "Read", "Update", "Delete")
DEFAULT_PORT = 9876
NOT_FOUND = 404
BAD_REQUEST = 400


class RpcError(RuntimeError):
    """The remote call failed for a reason other than a missing todo."""


def _invoke(storage: TodoStorage, method: str, params: object) -> object:
    service, _, name = method.partition(".")
    if service != SERVICE or name not in METHODS:
        raise RpcError(f"rpc: can't find method {method}")
    todo = Todo.from_dict(params)
    if name == "Read":
        return {task: found.to_dict() for task, found in storage.read(todo).items()}
    getattr(storage, name.lower())(todo)
    return None


def _error(code: int, message: str) -> Exception:
    return TodoNotFound(message) if code == NOT_FOUND else RpcError(message)


class _XmlRpcDispatcher:
    def __init__(self, storage: TodoStorage) -> None:
        self._storage = storage

    def _dispatch(self, method: str, params: tuple) -> object:
        if len(params) != 1:
            raise xmlrpc.client.Fault(BAD_REQUEST, f"{method} takes exactly one argument")
        try:
            return _invoke(self._storage, method, params[0])
        except TodoNotFound as exc:
            raise xmlrpc.client.Fault(NOT_FOUND, str(exc)) from exc
        except (RpcError, ValueError) as exc:
            raise xmlrpc.client.Fault(BAD_REQUEST, str(exc)) from exc


class _XmlRpcServer(socketserver.ThreadingMixIn, SimpleXMLRPCServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], storage: TodoStorage) -> None:
        super().__init__(address, allow_none=True, logRequests=False)
        self.storage = storage
        self.register_instance(_XmlRpcDispatcher(storage))


class _LineHandler(socketserver.StreamRequestHandler):
    server: _LineServer

    def handle(self) -> None:
        for line in self.rfile:
            try:
                request = json.loads(line)
                result = _invoke(self.server.storage, request["method"], request["params"])
                reply: dict[str, object] = {"result": result}
            except TodoNotFound as exc:
                reply = {"error": {"code": NOT_FOUND, "message": str(exc)}}
            except (RpcError, ValueError, KeyError, TypeError) as exc:
                reply = {"error": {"code": BAD_REQUEST, "message": str(exc)}}
            self.wfile.write(json.dumps(reply).encode("utf-8") + b"\n")


class _LineServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address: tuple[str, int], storage: TodoStorage) -> None:
        self.storage = storage
        super().__init__(address, _LineHandler)


def make_server(address: tuple[str, int], use_http: bool = True,
                storage: TodoStorage | None = None) -> socketserver.TCPServer:
    """Bind an RPC server for ``storage`` to ``address``; run it with ``serve_forever()``."""
    storage = TodoStorage() if storage is None else storage
    if use_http:
        return _XmlRpcServer(address, storage)
    return _LineServer(address, storage)


class RpcClient:
    """A connection to an RPC server; ``call`` may be used from several threads."""

    def __init__(self, address: tuple[str, int], use_http: bool = True) -> None:
        host, port = address
        self.use_http = use_http
        self._lock = threading.Lock()
        if use_http:
            self._proxy = xmlrpc.client.ServerProxy(f"http://{host}:{port}/RPC2", allow_none=True)
        else:
            self._sock = socket.create_connection((host, port))
            self._rfile = self._sock.makefile("rb")

    def __enter__(self) -> RpcClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _call_http(self, method: str, params: dict) -> object:
        try:
            return getattr(self._proxy, method)(params)
        except xmlrpc.client.Fault as fault:
            raise _error(fault.faultCode, fault.faultString) from fault

    def _call_line(self, method: str, params: dict) -> object:
        request = json.dumps({"method": method, "params": params}).encode("utf-8") + b"\n"
        self._sock.sendall(request)
        line = self._rfile.readline()
        if not line:
            raise ConnectionError("server closed the connection")
        reply = json.loads(line)
        if "error" in reply:
            raise _error(reply["error"]["code"], reply["error"]["message"])
        return reply["result"]

    def call(self, method: str, todo: Todo) -> dict[str, Todo] | None:
        """Call ``method`` (such as ``TodoStorage.Read``) with ``todo``.

        Read returns the todos it found; the other methods return None.
        """
        with self._lock:
            if self.use_http:
                raw = self._call_http(method, todo.to_dict())
            else:
                raw = self._call_line(method, todo.to_dict())
        if method.partition(".")[2] == "Read":
            return {task: Todo.from_dict(data) for task, data in raw.items()}
        return None

    def close(self) -> None:
        """Close the connection."""
        if self.use_http:
            self._proxy("close")()
        else:
            self._rfile.close()
            self._sock.close()


def run_client(address: tuple[str, int], use_http: bool = True) -> list[dict[str, Todo]]:
    """Run the create/read/update/delete sequence; returns the three reads in order."""
    lectures_create = Todo("predavanja", False)
    lectures_update = Todo("predavanja", True)
    practicals = Todo("vaje", False)
    read_all = Todo("", False)
    reads: list[dict[str, Todo]] = []

    print(f"RPC client connecting to {address[0]}:{address[1]}, HTTP={use_http}", flush=True)
    with RpcClient(address, use_http) as client:
        print("1. Create: ", end="")
        client.call("TodoStorage.Create", lectures_create)
        print("done")

        print("2. Read 1: ", end="")
        reads.append(client.call("TodoStorage.Read", lectures_update))
        print(reads[-1], ": done")

        print("3. Create: ", end="")
        client.call("TodoStorage.Create", practicals)
        print("done")

        print("4. Read *: ", end="")
        reads.append(client.call("TodoStorage.Read", read_all))
        print(reads[-1], ": done")

        print("5. Update: ", end="")
        client.call("TodoStorage.Update", lectures_update)
        print("done")

        print("6. Delete: ", end="")
        client.call("TodoStorage.Delete", practicals)
        print("done")

        print("7. Read *: ", end="")
        with ThreadPoolExecutor(max_workers=1) as pool:
            pending = pool.submit(client.call, "TodoStorage.Read", lectures_update)
            reads.append(pending.result())
        print(reads[-1], ": done")
    return reads


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="RPC server and client for a todo store.")
    parser.add_argument("-s", "--server", default="", help="server URL")
    parser.add_argument("-p", "--port", type=int, default=DEFAULT_PORT, help="port number")
    parser.add_argument("-c", "--connection", default="http", help="connection type (http or tcp)")
    args = parser.parse_args(argv)

    use_http = args.connection.upper().startswith("H")
    if args.server:
        run_client((args.server, args.port), use_http)
        return 0

    with make_server(("", args.port), use_http) as server:
        print(f"RPC server listening at {socket.gethostname()}:{args.port}, HTTP={use_http}",
              flush=True)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())