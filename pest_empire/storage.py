# pest_empire/storage.py
"""
Save/load of the game state as a versioned JSON envelope:
{"version": ..., "timestamp": ..., "state": {...}}

Stores are best-effort. Failures are logged and reported through the
return value; a broken save never raises into the game.
"""
import json
import logging
import os
import time
from typing import Optional
from pydantic import BaseModel, ValidationError

from .config import DEFAULT_SAVE_PATH, SAVE_VERSION
from .models import GameState

logger = logging.getLogger(__name__)


class SaveEnvelope(BaseModel):
    version: str
    timestamp: int  # Milliseconds since epoch
    state: GameState


def _decode(serialized: str) -> Optional[SaveEnvelope]:
    try:
        raw = json.loads(serialized)
    except json.JSONDecodeError as e:
        logger.error("Save data is not valid JSON: %s", e)
        return None

    if not isinstance(raw, dict) or 'state' not in raw:
        logger.error("Invalid save data: missing 'state'")
        return None

    try:
        return SaveEnvelope.model_validate(raw)
    except ValidationError as e:
        logger.error("Invalid save data: %s", e)
        return None


class SaveStore:
    """Key-value backed persistence gateway. Subclasses supply the raw read/write."""

    def _read(self) -> Optional[str]:
        raise NotImplementedError

    def _write(self, serialized: str):
        raise NotImplementedError

    def _remove(self):
        raise NotImplementedError

    def save(self, state: GameState) -> bool:
        envelope = SaveEnvelope(version=SAVE_VERSION, timestamp=int(time.time() * 1000), state=state)
        try:
            self._write(envelope.model_dump_json())
        except OSError as e:
            logger.error("Failed to save game: %s", e)
            return False
        logger.debug("Game saved (week %d)", state.week)
        return True

    def load(self) -> Optional[GameState]:
        try:
            serialized = self._read()
        except OSError as e:
            logger.error("Failed to read save: %s", e)
            return None

        if not serialized:
            logger.info("No saved game found")
            return None

        envelope = _decode(serialized)
        if envelope is None:
            return None
        logger.info("Game loaded: week %d, saved at %d", envelope.state.week, envelope.timestamp)
        return envelope.state

    def has_save(self) -> bool:
        try:
            return self._read() is not None
        except OSError:
            return False

    def delete_save(self) -> bool:
        try:
            self._remove()
        except OSError as e:
            logger.error("Failed to delete save: %s", e)
            return False
        return True

    def export_save(self) -> Optional[str]:
        try:
            return self._read()
        except OSError as e:
            logger.error("Failed to export save: %s", e)
            return None

    def import_save(self, serialized: str) -> bool:
        if _decode(serialized) is None:
            return False
        try:
            self._write(serialized)
        except OSError as e:
            logger.error("Failed to import save: %s", e)
            return False
        return True

    def saved_at(self) -> Optional[int]:
        serialized = self.export_save()
        if not serialized:
            return None
        envelope = _decode(serialized)
        return envelope.timestamp if envelope else None


class MemorySaveStore(SaveStore):
    def __init__(self):
        self._data: Optional[str] = None

    def _read(self):
        return self._data

    def _write(self, serialized):
        self._data = serialized

    def _remove(self):
        self._data = None


class FileSaveStore(SaveStore):
    def __init__(self, path: str = DEFAULT_SAVE_PATH):
        self.path = path

    def _read(self):
        if not os.path.exists(self.path):
            return None
        with open(self.path, 'r') as f:
            return f.read()

    def _write(self, serialized):
        directory = os.path.dirname(self.path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
        with open(self.path, 'w') as f:
            f.write(serialized)

    def _remove(self):
        if os.path.exists(self.path):
            os.remove(self.path)
