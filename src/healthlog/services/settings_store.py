"""
Key-value settings stores for the healthlog application.

A settings store is the durable backing surface the ActivityStore writes its
whole collection to. It is synchronous, fallible and non-transactional: every
operation either completes or raises SettingsStoreError.

Classes:
    SettingsStore: Abstract key-value interface
    InMemorySettingsStore: Process-local store for tests and previews
    JsonFileSettingsStore: Single JSON settings file on local disk
"""

import base64
import binascii
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from loguru import logger

from ..errors import SettingsStoreError


class SettingsStore(ABC):
    """
    Abstract key-value settings store.

    Values are opaque bytes. Implementations raise SettingsStoreError for
    any failure of the underlying medium.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the value stored under key, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store value under key, overwriting any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""

    def contains(self, key: str) -> bool:
        return self.get(key) is not None


class InMemorySettingsStore(SettingsStore):
    """Settings store backed by a dictionary; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._values: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._values.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._values[key] = bytes(value)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileSettingsStore(SettingsStore):
    """
    Settings store persisted as one JSON document on local disk.

    The document maps each key to its base64-encoded value. Every write
    rewrites the whole document through a temporary file followed by an
    atomic replace, so a crash mid-write leaves the previous document intact.
    Reads of an unreadable document raise; writes move it to ``corrupt_path``
    and start a new one.

    Attributes:
        path: Location of the settings file

    Example:
        >>> store = JsonFileSettingsStore("~/.healthlog/settings.json")
        >>> store.set("userActivities", b"[]")
        >>> store.get("userActivities")
        b'[]'
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def get(self, key: str) -> Optional[bytes]:
        encoded = self._read_document().get(key)
        if encoded is None:
            return None

        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, TypeError) as e:
            raise SettingsStoreError(
                f"Value for '{key}' in {self.path} is not valid base64: {e}"
            ) from e

    def set(self, key: str, value: bytes) -> None:
        document = self._read_document_for_write()
        document[key] = base64.b64encode(value).decode("ascii")
        self._write_document(document)

    def remove(self, key: str) -> None:
        document = self._read_document_for_write()
        if key not in document:
            return

        del document[key]
        self._write_document(document)

    @property
    def corrupt_path(self) -> Path:
        """Where an unreadable settings file is moved before it is rebuilt."""
        return self.path.with_name(self.path.name + ".corrupt")

    def _read_document_for_write(self) -> Dict[str, str]:
        try:
            return self._read_document()
        except SettingsStoreError as e:
            logger.warning(f"{e}; moving it to {self.corrupt_path} and starting a new one")

        try:
            os.replace(self.path, self.corrupt_path)
        except OSError as e:
            raise SettingsStoreError(
                f"Could not move unreadable settings file {self.path} aside: {e}"
            ) from e
        return {}

    def _read_document(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise SettingsStoreError(f"Could not read settings file {self.path}: {e}") from e

        if not isinstance(document, dict):
            raise SettingsStoreError(f"Settings file {self.path} does not hold a JSON object")

        return document

    def _write_document(self, document: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(document, handle)
                os.replace(tmp_path, self.path)
            except BaseException:
                os.unlink(tmp_path)
                raise
        except OSError as e:
            raise SettingsStoreError(f"Could not write settings file {self.path}: {e}") from e

        logger.debug(f"Wrote {len(document)} keys to {self.path}")
