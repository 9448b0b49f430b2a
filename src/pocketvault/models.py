"""Defines classes for the records kept in the store file.

The most important class is :class:`Store`, which holds everything that gets loaded and saved.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional


def _str_field(obj: dict, name: str) -> str:
    val = obj.get(name)
    if val is None:
        return ''
    if not isinstance(val, str):
        raise TypeError(f'Field "{name}" must be a string, not {type(val).__name__}')
    return val


def _list_field(obj: dict, name: str) -> list:
    val = obj.get(name)
    if val is None:
        return []
    if not isinstance(val, list):
        raise TypeError(f'Field "{name}" must be an array, not {type(val).__name__}')
    return val


def _check_object(val, what: str) -> dict:
    if val is None:
        return {}
    if not isinstance(val, dict):
        raise TypeError(f'{what} must be an object, not {type(val).__name__}')
    return val


@dataclass
class User:
    """A registered user."""

    username: str
    """Unique across the store. Matched exactly, including case."""

    password: str
    """Stored and compared as plain text."""

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'username': self.username,
            'password': self.password
        }

    @classmethod
    def from_json(cls, obj) -> User:
        obj = _check_object(obj, 'User')
        return cls(username=_str_field(obj, 'username'), password=_str_field(obj, 'password'))


@dataclass
class Note:
    """A short text note.

    Nothing is unique about a note; several may share the same owner and title.
    """

    owner: str
    """Username of the note's owner. It does not have to belong to a registered user."""

    title: str

    body: str = ''

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'owner': self.owner,
            'title': self.title,
            'body': self.body
        }

    @classmethod
    def from_json(cls, obj) -> Note:
        obj = _check_object(obj, 'Note')
        return cls(owner=_str_field(obj, 'owner'), title=_str_field(obj, 'title'), body=_str_field(obj, 'body'))


@dataclass
class Store:
    """Everything kept in the store file.

    Instances are loaded in full, changed in memory, and saved in full; see :mod:`pocketvault.store`.
    """

    users: List[User] = field(default_factory=list)
    """Registered users, in order of registration."""

    notes: List[Note] = field(default_factory=list)
    """All notes for all owners, in the order they were added."""

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'users': [u.as_json() for u in self.users],
            'notes': [n.as_json() for n in self.notes]
        }

    @classmethod
    def from_json(cls, obj) -> Store:
        """Builds an instance from decoded json.

        Null or missing objects and arrays are treated as empty, missing strings as ``''``, and unknown fields
        are ignored.
        Raises :exc:`TypeError` if a value has the wrong json type.
        """
        obj = _check_object(obj, 'Store')
        return cls(users=[User.from_json(u) for u in _list_field(obj, 'users')],
                   notes=[Note.from_json(n) for n in _list_field(obj, 'notes')])

    def find_user(self, username: str) -> Optional[User]:
        """Returns the first user whose username exactly equals the given one, or None."""
        for user in self.users:
            if user.username == username:
                return user
        return None

    def notes_for(self, owner: str) -> List[Note]:
        """Returns the notes whose owner exactly equals the given one, in the order they were added."""
        return [n for n in self.notes if n.owner == owner]
