import pytest

from vzporedni.storage import Todo, TodoNotFound, TodoStorage, main


@pytest.fixture
def store():
    storage = TodoStorage()
    storage.create(Todo("predavanja", False))
    storage.create(Todo("vaje", False))
    return storage


def test_read_one_ignores_query_completion(store):
    assert store.read(Todo("predavanja", True)) == {"predavanja": Todo("predavanja", False)}


def test_read_all_with_empty_task(store):
    assert store.read(Todo()) == {
        "predavanja": Todo("predavanja", False),
        "vaje": Todo("vaje", False),
    }


def test_read_all_returns_a_copy(store):
    result = store.read(Todo())
    result.clear()
    assert len(store.read(Todo())) == 2


def test_read_missing_raises(store):
    with pytest.raises(TodoNotFound):
        store.read(Todo("izpit"))


def test_create_replaces_existing(store):
    store.create(Todo("vaje", True))
    assert store.read(Todo("vaje")) == {"vaje": Todo("vaje", True)}


def test_update_existing(store):
    store.update(Todo("predavanja", True))
    assert store.read(Todo("predavanja")) == {"predavanja": Todo("predavanja", True)}


def test_update_missing_raises(store):
    with pytest.raises(TodoNotFound):
        store.update(Todo("izpit", True))
    assert "izpit" not in store.read(Todo())


def test_delete_removes(store):
    store.delete(Todo("vaje"))
    assert store.read(Todo()) == {"predavanja": Todo("predavanja", False)}
    with pytest.raises(TodoNotFound):
        store.delete(Todo("vaje"))


def test_not_found_message():
    assert str(TodoNotFound()) == "not found"


def test_to_dict_uses_json_names():
    assert Todo("vaje", True).to_dict() == {"task": "vaje", "completed": True}


def test_dict_round_trip():
    todo = Todo("predavanja", True)
    assert Todo.from_dict(todo.to_dict()) == todo


def test_from_dict_defaults():
    assert Todo.from_dict({}) == Todo("", False)


@pytest.mark.parametrize("data", [{"task": 5}, {"completed": "yes"}, ["task"]])
def test_from_dict_rejects_bad_data(data):
    with pytest.raises(ValueError):
        Todo.from_dict(data)


def test_main_runs_all_steps(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.count("done") == 7
    last = out.strip().splitlines()[-1]
    assert last.startswith("7. Read *: ")
    assert "completed=True" in last