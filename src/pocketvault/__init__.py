"""Keeps users and short text notes in a single JSON file.

If you installed via ``pip``, run ``pocketvault -h`` to get help.
Or, run ``python3 -m pocketvault -h``.

To use the Python API, look at :class:`pocketvault.api.Pocketvault`
"""
