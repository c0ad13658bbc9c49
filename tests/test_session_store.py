from adapters.session_store import FileSessionStore, MemorySessionStore
from core.domain.models import User
from core.interfaces.session import SessionStore


def test_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "nested" / "session.json"
    FileSessionStore(path).set_token("abc")
    FileSessionStore(path).set_user(User(id=1, name="Ana"))

    store = FileSessionStore(path)
    assert store.get_token() == "abc"
    assert store.get_user().name == "Ana"


def test_file_store_clear_removes_file(tmp_path):
    path = tmp_path / "session.json"
    store = FileSessionStore(path)
    store.set_token("abc")

    store.clear()
    store.clear()

    assert not path.exists()
    assert store.get_token() is None


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{broken", encoding="utf-8")

    store = FileSessionStore(path)

    assert store.get_token() is None
    assert store.get_user() is None


def test_stores_satisfy_protocol(tmp_path):
    assert isinstance(FileSessionStore(tmp_path / "s.json"), SessionStore)
    assert isinstance(MemorySessionStore(), SessionStore)


def test_memory_store():
    store = MemorySessionStore(token="t")
    store.set_user(User(id=2, name="B"))

    store.clear()

    assert store.get_token() is None
    assert store.get_user() is None
