"""Command-line interface for pocketvault."""


import argparse
from dataclasses import replace
import json
import logging
import sys
from terminaltables import AsciiTable
from pocketvault import api
from pocketvault.api import Pocketvault
from pocketvault.conf import ConfError, VaultConf
from pocketvault.store import StoreError, ensure_data_dir


EXAMPLES = """Usage:
  pocketvault register -u alice -p s3cr3t
  pocketvault login -u alice -p s3cr3t
  pocketvault add-note -u alice -t T -b B
  pocketvault list-notes -u alice"""


def _register(args, pv: Pocketvault) -> int:
    pv.register(args.user, args.password)
    print('registered')
    return 0


def _login(args, pv: Pocketvault) -> int:
    try:
        pv.login(args.user, args.password)
    except (api.AuthenticationError, StoreError) as e:
        print(f'login failed: {e}')
        return 1
    print('login ok')
    return 0


def _add_note(args, pv: Pocketvault) -> int:
    pv.add_note(args.user, args.title, args.body)
    print('note added')
    return 0


def _list_notes(args, pv: Pocketvault) -> int:
    notes = pv.list_notes(args.user)
    if args.json:
        print(json.dumps([n.as_json() for n in notes]))
    elif args.table:
        data = [('Title', 'Body')] + [(n.title, n.body) for n in notes]
        table = AsciiTable(data)
        print(table.table)
    else:
        for note in notes:
            print(f'- {note.title}: {note.body}')
    return 0


def _help(args, pv: Pocketvault) -> int:
    print(EXAMPLES)
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.set_defaults(func=_help)
    parser.add_argument('-d', '--data', help='Data directory. Defaults to ./data unless set in ~/.pocketvault.conf.py')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log details of what is happening to stderr.')

    subs = parser.add_subparsers(title='Commands')

    p_reg = subs.add_parser('register', help='Register a new user.')
    p_reg.add_argument('-u', '--user', default='', help='Username. Must not already be registered.')
    p_reg.add_argument('-p', '--password', default='', help='Password. Stored in plain text!')
    p_reg.set_defaults(func=_register, parser=p_reg)

    p_login = subs.add_parser('login', help='Check a username and password.')
    p_login.add_argument('-u', '--user', default='', help='Username.')
    p_login.add_argument('-p', '--password', default='', help='Password.')
    p_login.set_defaults(func=_login, parser=p_login)

    p_add = subs.add_parser(
        'add-note',
        help='Add a note. The user does not need to be registered, and no password is checked.')
    p_add.add_argument('-u', '--user', default='', help='Owner of the note.')
    p_add.add_argument('-t', '--title', default='', help='Title of the note.')
    p_add.add_argument('-b', '--body', default='', help='Text of the note. Empty if omitted.')
    p_add.set_defaults(func=_add_note, parser=p_add)

    p_list = subs.add_parser('list-notes', help='List the notes belonging to a user, oldest first.')
    p_list.add_argument('-u', '--user', default='', help='Owner of the notes.')
    p_list_formats = p_list.add_mutually_exclusive_group()
    p_list_formats.add_argument('-j', '--json', action='store_true',
                                help='Output as JSON. The output is an array of objects with the keys '
                                     'owner, title and body.')
    p_list_formats.add_argument('--table', action='store_true', help='Format output as a table.')
    p_list.set_defaults(func=_list_notes, parser=p_list)

    p_help = subs.add_parser('help', help='Show usage examples.')
    p_help.set_defaults(func=_help, parser=p_help)

    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.

    The exit code is 2 for missing arguments and 1 for failures while running the command.
    """
    parser = argparser()
    args = parser.parse_args(args)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    try:
        conf = VaultConf.for_user()
        if args.data:
            conf = replace(conf, data_dir=args.data)
        pv = conf.instantiate()
        ensure_data_dir(pv.conf.data_dir, pv.conf.dir_mode)
        return args.func(args, pv)
    except api.ValidationError as e:
        print(e)
        args.parser.print_usage(sys.stdout)
        return 2
    except (api.Error, StoreError, ConfError) as e:
        print(f'error: {e}')
        return 1
