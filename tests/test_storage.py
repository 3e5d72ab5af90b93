from spoonplanner.storage import JsonFileStore, MemoryStore


def test_memory_store():
    s = MemoryStore()
    assert s.get("k") is None
    s.set("k", "v")
    assert s.get("k") == "v"
    s.delete("k")
    s.delete("k")
    assert s.get("k") is None


def test_json_file_store_roundtrip(tmp_path):
    s = JsonFileStore(str(tmp_path / "history"))
    s.set("history_2025-01-06", '{"history": [], "currentIndex": -1}')
    assert (tmp_path / "history" / "history_2025-01-06.json").exists()
    # a fresh instance sees the same data
    assert JsonFileStore(str(tmp_path / "history")).get("history_2025-01-06") == '{"history": [], "currentIndex": -1}'
    s.delete("history_2025-01-06")
    assert s.get("history_2025-01-06") is None


def test_json_file_store_sanitizes_keys(tmp_path):
    s = JsonFileStore(str(tmp_path))
    s.set("../evil/key", "x")
    assert s.get("../evil/key") == "x"
    assert not (tmp_path.parent / "evil").exists()
