# core/utils/preferences.py
"""
Cache-aside policy for user preferences (widget layout, theme, sync settings).

The remote store is the source of truth. A local copy is kept as a backup
and is only consulted when the remote has nothing or cannot be reached.
"""
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class RemoteStore(Protocol):
    def load(self, key: str) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...


class LocalStore(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """Local store kept in process memory"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value


class JsonFileStore:
    """Local store backed by one JSON object on disk.

    Unreadable or corrupt files behave like an empty store; write failures
    are logged and ignored since the copy is only a backup.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preference file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, default=str)
        except OSError as e:
            logger.warning(f"Could not write preference file {self.path}: {e}")


class PreferenceCache:
    """Load and save one preference with remote -> local -> default precedence.

    On load, a value found only in the local copy is written up to the remote
    store. If the remote store fails, the local copy (or the default) is
    returned. Saves go to the remote store first, then the local copy; a
    remote failure propagates to the caller.

    `normalize` turns a stored value (remote or local) into the in-memory
    form; `dump` turns it back into what the local store keeps.
    """

    def __init__(self, key: str, remote: RemoteStore, local: LocalStore,
                 default: Callable[[], Any], normalize: Optional[Callable[[Any], Any]] = None,
                 dump: Optional[Callable[[Any], Any]] = None):
        self.key = key
        self.remote = remote
        self.local = local
        self.default = default
        self.normalize = normalize or (lambda value: value)
        self.dump = dump or (lambda value: value)

    def _local_value(self) -> Any:
        value = self.local.get(self.key)
        if value is None:
            return None
        return self.normalize(value)

    def load(self) -> Any:
        try:
            value = self.remote.load(self.key)
            if value is not None:
                return self.normalize(value)

            local_value = self._local_value()
            if local_value is not None:
                self.save(local_value)
                return local_value

            return self.default()
        except Exception as e:
            logger.error(f"Failed to load preference {self.key!r}: {e}")
            local_value = self._local_value()
            if local_value is not None:
                return local_value
            return self.default()

    def save(self, value: Any) -> None:
        try:
            self.remote.save(self.key, value)
        except Exception as e:
            logger.error(f"Failed to save preference {self.key!r}: {e}")
            raise
        self.local.set(self.key, self.dump(value))
