from __future__ import annotations
from dataclasses import dataclass, replace
import os.path


DEFAULT_DATA_DIR = './data'
STORE_FILENAME = 'store.json'


class ConfError(Exception):
    """Raised when the user config file does not define a usable config."""


@dataclass
class VaultConf:
    """Configures where and how pocketvault keeps its data."""

    data_dir: str = DEFAULT_DATA_DIR
    """Directory containing the store file. It will be created if it does not exist.

    Instead of setting this in your ``.pocketvault.conf.py``, you can pass a ``--data`` command-line argument.
    """

    store_filename: str = STORE_FILENAME
    """Name of the file within :attr:`data_dir` that holds all users and notes."""

    dir_mode: int = 0o700
    """Permissions used when creating :attr:`data_dir`."""

    file_mode: int = 0o600
    """Permissions set on the store file each time it is written."""

    @property
    def store_path(self) -> str:
        return os.path.join(self.data_dir, self.store_filename)

    @classmethod
    def for_user(cls) -> VaultConf:
        """Loads config from ``~/.pocketvault.conf.py``, or returns the defaults if that file does not exist.

        The file is a Python script which must assign a VaultConf instance to the variable ``conf``:

        .. code-block:: python

           from pocketvault.conf import *
           conf = VaultConf(data_dir='/Users/alice/vault')
        """
        path = os.path.expanduser(os.path.join('~', '.pocketvault.conf.py'))
        if not os.path.exists(path):
            return cls()
        with open(path, 'r') as file:
            conf_script = file.read()
        context = {}
        exec(conf_script, context)
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise ConfError('You need to assign an instance of VaultConf to the variable `conf` '
                            f'in your config file: {path}')
        return context['conf']

    def standardize(self):
        return replace(
            self,
            data_dir=os.path.abspath(self.data_dir)
        )

    def instantiate(self):
        from pocketvault.api import Pocketvault
        return Pocketvault(self.standardize())
