import os
import re
from typing import Dict, Optional, Protocol


class KeyValueStore(Protocol):
    """Durable text storage on this device, e.g. the undo history per week."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self):
        self.data: Dict[str, str] = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


_SAFE_KEY = re.compile(r'[^A-Za-z0-9_.-]')


class JsonFileStore:
    """One file per key below `base_dir` (default ~/.spoonplanner/history)."""

    def __init__(self, base_dir: str = None):
        self.base_dir = base_dir or os.path.join(os.path.expanduser("~"), ".spoonplanner", "history")
        os.makedirs(self.base_dir, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.base_dir, _SAFE_KEY.sub('_', key) + '.json')

    def get(self, key):
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def set(self, key, value):
        path = self._path(key)
        tmp = path + '.tmp'
        with open(tmp, 'w', encoding='utf-8') as f:
            f.write(value)
        os.replace(tmp, path)

    def delete(self, key):
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)
