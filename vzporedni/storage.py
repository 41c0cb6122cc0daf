"""A small thread-safe store of to-do items keyed by task."""

from __future__ import annotations

import argparse
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Todo:
    """A task and whether it is done."""

    task: str = ""
    completed: bool = False

    def to_dict(self) -> dict[str, object]:
        """The JSON form: ``{"task": ..., "completed": ...}``."""
        return {"task": self.task, "completed": self.completed}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Todo:
        """Build a todo from its JSON form; missing fields take their zero values."""
        if not isinstance(data, Mapping):
            raise ValueError(f"a todo must be a mapping, got {type(data).__name__}")
        task = data.get("task", "")
        completed = data.get("completed", False)
        if not isinstance(task, str):
            raise ValueError(f"task must be a string, got {task!r}")
        if not isinstance(completed, bool):
            raise ValueError(f"completed must be a boolean, got {completed!r}")
        return cls(task, completed)


class TodoNotFound(LookupError):
    """The requested task is not in the store."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class TodoStorage:
    """Todos keyed by their task; all operations are safe to call from many threads."""

    def __init__(self) -> None:
        self._todos: dict[str, Todo] = {}
        self._lock = threading.Lock()

    def create(self, todo: Todo) -> None:
        """Store ``todo``, replacing any todo with the same task."""
        with self._lock:
            self._todos[todo.task] = todo

    def read(self, todo: Todo) -> dict[str, Todo]:
        """All todos when ``todo.task`` is empty, otherwise the one with that task."""
        with self._lock:
            if not todo.task:
                return dict(self._todos)
            found = self._todos.get(todo.task)
            if found is None:
                raise TodoNotFound()
            return {found.task: found}

    def update(self, todo: Todo) -> None:
        """Replace the stored todo with the same task."""
        with self._lock:
            if todo.task not in self._todos:
                raise TodoNotFound()
            self._todos[todo.task] = todo

    def delete(self, todo: Todo) -> None:
        """Remove the todo with the same task."""
        with self._lock:
            if todo.task not in self._todos:
                raise TodoNotFound()
            del self._todos[todo.task]


def main(argv: Sequence[str] | None = None) -> int:
    argparse.ArgumentParser(description="Run CRUD operations on a local todo store.").parse_args(argv)

    store = TodoStorage()
    lectures_create = Todo("predavanja", False)
    lectures_update = Todo("predavanja", True)
    practicals = Todo("vaje", False)
    read_all = Todo("", False)

    print("1. Create: ", end="")
    store.create(lectures_create)
    print("done")

    print("2. Read 1: ", end="")
    print(store.read(lectures_update), ": done")

    print("3. Create: ", end="")
    store.create(practicals)
    print("done")

    print("4. Read *: ", end="")
    print(store.read(read_all), ": done")

    print("5. Update: ", end="")
    store.update(lectures_update)
    print("done")

    print("6. Delete: ", end="")
    store.delete(practicals)
    print("done")

    print("7. Read *: ", end="")
    print(store.read(lectures_update), ": done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())