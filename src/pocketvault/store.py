"""Reads and writes the store file.

The whole :class:`pocketvault.models.Store` is loaded with :func:`load` and written back with :func:`save`;
there are no partial updates. Nothing is locked, so if two processes change the same data directory at the same
time, the last one to save wins and the other's changes are lost.
"""

import json
import logging
import os
import os.path

from pocketvault.conf import STORE_FILENAME
from pocketvault.models import Store


logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for failures reading or writing the store file."""
    def __init__(self, message: str, path: str, cause: BaseException = None):
        super().__init__(message, path)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self):
        if self.cause:
            return f'{self.message} [{self.path}]: {self.cause}'
        return f'{self.message} [{self.path}]'


class DeserializationError(StoreError):
    """Raised when the store file exists but does not contain a valid store."""


class StoreIOError(StoreError):
    """Raised when the store file or its directory cannot be read or written."""


def ensure_data_dir(base_path: str, mode: int = 0o700) -> None:
    """Creates the directory if it does not exist yet. Raises :exc:`StoreIOError` if that fails."""
    try:
        os.makedirs(base_path, mode=mode, exist_ok=True)
    except OSError as e:
        raise StoreIOError('Cannot create data directory', base_path, e) from e


def load(base_path: str, filename: str = STORE_FILENAME) -> Store:
    """Reads the entire store from the file in the given directory.

    If the file does not exist, an empty store is returned and nothing is created.

    Raises :exc:`DeserializationError` if the file is not a valid store, or :exc:`StoreIOError` if it cannot be read.
    """
    path = os.path.join(base_path, filename)
    try:
        with open(path, 'r', encoding='utf-8') as file:
            text = file.read()
    except FileNotFoundError:
        logger.debug('No store file at %s, starting empty', path)
        return Store()
    except UnicodeDecodeError as e:
        raise DeserializationError('Store file is not valid UTF-8', path, e) from e
    except OSError as e:
        raise StoreIOError('Cannot read store file', path, e) from e

    try:
        store = Store.from_json(json.loads(text))
    except (ValueError, TypeError) as e:
        raise DeserializationError('Store file is not a valid store', path, e) from e
    logger.debug('Loaded %d users and %d notes from %s', len(store.users), len(store.notes), path)
    return store


def save(base_path: str, store: Store, filename: str = STORE_FILENAME,
         dir_mode: int = 0o700, file_mode: int = 0o600) -> None:
    """Replaces the contents of the store file in the given directory with the entire given store.

    The directory is created first if necessary. The write is not atomic.

    Raises :exc:`StoreIOError` if the directory or file cannot be written.
    """
    ensure_data_dir(base_path, dir_mode)
    path = os.path.join(base_path, filename)
    text = json.dumps(store.as_json(), indent=2, ensure_ascii=False)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, file_mode)
        with os.fdopen(fd, 'w', encoding='utf-8') as file:
            file.write(text)
        # os.open only applies the mode when creating the file
        os.chmod(path, file_mode)
    except OSError as e:
        raise StoreIOError('Cannot write store file', path, e) from e
    logger.debug('Saved %d users and %d notes to %s', len(store.users), len(store.notes), path)
