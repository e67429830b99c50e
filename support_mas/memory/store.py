"""
Memory Store - in-process key-value session memory
"""
import copy
from typing import Any, Dict, List


class MemoryStore:
    """
    Key-value memory namespaced by session id.
    Lives for the process lifetime; clear() resets everything between runs.
    """

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    def get(self, session_id: str, key: str, default: Any = None) -> Any:
        return self._data.get(session_id, {}).get(key, default)

    def set(self, session_id: str, key: str, value: Any):
        self._data.setdefault(session_id, {})[key] = value

    def append(self, session_id: str, key: str, value: Any) -> List[Any]:
        """Append to a list entry, creating it when missing."""
        items = self._data.setdefault(session_id, {}).setdefault(key, [])
        items.append(value)
        return items

    def get_session(self, session_id: str) -> Dict[str, Any]:
        return copy.deepcopy(self._data.get(session_id, {}))

    def delete_session(self, session_id: str):
        self._data.pop(session_id, None)

    def ping(self) -> bool:
        return True

    def clear(self):
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._data
