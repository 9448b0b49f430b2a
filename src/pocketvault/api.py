"""Provides the main entry point for using the library, :class:`Pocketvault`"""

from __future__ import annotations
import logging
from typing import List

from pocketvault import store
from pocketvault.conf import VaultConf
from pocketvault.models import Note, Store, User


logger = logging.getLogger(__name__)


class Error(Exception):
    pass


class ValidationError(Error, ValueError):
    """Raised before touching the store when a required argument is missing or empty."""


class UserExists(Error):
    def __init__(self, username: str):
        super().__init__('user exists')
        self.username = username


class AuthenticationError(Error):
    """Base class for login failures.

    Callers that don't want to reveal whether a username is registered should catch this rather than
    the subclasses.
    """
    def __init__(self, message: str, username: str):
        super().__init__(message)
        self.username = username


class UserNotFound(AuthenticationError):
    def __init__(self, username: str):
        super().__init__('user not found', username)


class InvalidCredential(AuthenticationError):
    def __init__(self, username: str):
        super().__init__('invalid password', username)


def _require(**kwargs) -> None:
    missing = [k for k, v in kwargs.items() if not v]
    if missing:
        raise ValidationError(f'{" and ".join(missing)} required')


class Pocketvault:
    """Main entry point for working programmatically with a data directory.

    Every method loads the whole store from disk, and methods that change anything save the whole store
    before returning. Nothing is cached between calls, so an instance can be kept around as long as you like.

    Passwords are stored and compared as plain text. :meth:`add_note` does not check that the owner is registered
    or has logged in; callers are expected to take care of that.

    .. attribute:: conf
       :type: pocketvault.conf.VaultConf

    Example:

    .. code-block:: python

       from pocketvault.conf import VaultConf
       pv = VaultConf(data_dir='/tmp/vault').instantiate()
       pv.register('alice', 's3cr3t')
       pv.add_note('alice', 'Groceries', 'eggs, milk')
       for note in pv.list_notes('alice'):
           print(note.title)
    """
    @classmethod
    def for_user(cls) -> Pocketvault:
        """Creates an instance with config loaded from the ``~/.pocketvault.conf.py`` file, if there is one."""
        return VaultConf.for_user().instantiate()

    def __init__(self, conf: VaultConf):
        self.conf = conf

    def _load(self) -> Store:
        return store.load(self.conf.data_dir, self.conf.store_filename)

    def _save(self, data: Store) -> None:
        store.save(self.conf.data_dir, data, self.conf.store_filename,
                   dir_mode=self.conf.dir_mode, file_mode=self.conf.file_mode)

    def register(self, username: str, password: str) -> None:
        """Adds a new user.

        Raises :exc:`UserExists` (without changing anything) if the username is already taken.
        """
        _require(user=username, password=password)
        data = self._load()
        if data.find_user(username):
            logger.debug('Refusing to register existing user %s', username)
            raise UserExists(username)
        data.users.append(User(username, password))
        self._save(data)
        logger.debug('Registered user %s', username)

    def login(self, username: str, password: str) -> None:
        """Checks the username and password, returning normally if they match.

        Raises :exc:`UserNotFound` or :exc:`InvalidCredential` otherwise. Never changes the store.
        """
        _require(user=username, password=password)
        user = self._load().find_user(username)
        if not user:
            raise UserNotFound(username)
        if user.password != password:
            raise InvalidCredential(username)
        logger.debug('User %s logged in', username)

    def add_note(self, owner: str, title: str, body: str = '') -> Note:
        """Appends a note for the given owner and returns it."""
        _require(user=owner, title=title)
        data = self._load()
        note = Note(owner, title, body or '')
        data.notes.append(note)
        self._save(data)
        logger.debug('Added note %r for %s', title, owner)
        return note

    def list_notes(self, owner: str) -> List[Note]:
        """Returns the owner's notes in the order they were added. Never changes or creates the store file."""
        _require(user=owner)
        return self._load().notes_for(owner)
