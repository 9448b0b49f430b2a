import json
import os
from pathlib import Path
import stat
import pytest
from pocketvault import cli


def test_register_and_login(fs, capsys):
    assert cli.main(['-d', '/vault', 'register', '-u', 'alice', '-p', 's3cr3t']) == 0
    out, err = capsys.readouterr()
    assert out == 'registered\n'

    assert cli.main(['-d', '/vault', 'register', '--user', 'alice', '--password', 'other']) == 1
    out, err = capsys.readouterr()
    assert out == 'error: user exists\n'

    assert cli.main(['-d', '/vault', 'login', '-u', 'alice', '-p', 's3cr3t']) == 0
    out, err = capsys.readouterr()
    assert out == 'login ok\n'

    assert cli.main(['-d', '/vault', 'login', '-u', 'alice', '-p', 'other']) == 1
    out, err = capsys.readouterr()
    assert out == 'login failed: invalid password\n'

    assert cli.main(['-d', '/vault', 'login', '-u', 'bob', '-p', 'x']) == 1
    out, err = capsys.readouterr()
    assert out == 'login failed: user not found\n'


def test_notes(fs, capsys):
    assert cli.main(['-d', '/vault', 'add-note', '-u', 'alice', '-t', 'T1', '-b', 'B1']) == 0
    assert cli.main(['-d', '/vault', 'add-note', '-u', 'bob', '-t', 'T2', '-b', 'B2']) == 0
    assert cli.main(['-d', '/vault', 'add-note', '-u', 'alice', '-t', 'Empty']) == 0
    out, err = capsys.readouterr()
    assert out == 'note added\n' * 3

    assert cli.main(['-d', '/vault', 'list-notes', '-u', 'alice']) == 0
    out, err = capsys.readouterr()
    assert out == '- T1: B1\n- Empty: \n'

    assert cli.main(['-d', '/vault', 'list-notes', '-u', 'alice', '-j']) == 0
    out, err = capsys.readouterr()
    assert json.loads(out) == [{'owner': 'alice', 'title': 'T1', 'body': 'B1'},
                               {'owner': 'alice', 'title': 'Empty', 'body': ''}]

    assert cli.main(['-d', '/vault', 'list-notes', '-u', 'alice', '--table']) == 0
    out, err = capsys.readouterr()
    assert 'Title' in out
    assert 'T1' in out
    assert 'T2' not in out


def test_list_notes_fresh_directory(fs, capsys):
    assert cli.main(['-d', '/vault', 'list-notes', '-u', 'nobody']) == 0
    out, err = capsys.readouterr()
    assert out == ''
    assert Path('/vault').is_dir()
    assert stat.S_IMODE(os.stat('/vault').st_mode) == 0o700
    assert not Path('/vault/store.json').exists()


def test_default_data_dir(fs, capsys):
    fs.cwd = '/work'
    Path(fs.cwd).mkdir()
    assert cli.main(['add-note', '-u', 'alice', '-t', 'T']) == 0
    assert Path('/work/data/store.json').is_file()
    assert stat.S_IMODE(os.stat('/work/data/store.json').st_mode) == 0o600


def test_data_dir_from_config(fs, capsys):
    fs.create_file(os.path.expanduser('~/.pocketvault.conf.py'), contents="""from pocketvault.conf import *
conf = VaultConf(data_dir='/configured')""")
    assert cli.main(['add-note', '-u', 'alice', '-t', 'T']) == 0
    assert Path('/configured/store.json').is_file()
    assert cli.main(['-d', '/flag', 'add-note', '-u', 'alice', '-t', 'T']) == 0
    assert Path('/flag/store.json').is_file()


@pytest.mark.parametrize('args,message', [
    (['register'], 'user and password required'),
    (['register', '-u', 'alice'], 'password required'),
    (['register', '-p', 'pw'], 'user required'),
    (['login', '-u', 'alice', '-p', ''], 'password required'),
    (['add-note', '-u', 'alice', '-b', 'B'], 'title required'),
    (['list-notes'], 'user required'),
])
def test_missing_args(fs, capsys, args, message):
    assert cli.main(['-d', '/vault'] + args) == 2
    out, err = capsys.readouterr()
    assert out.startswith(message + '\n')
    assert 'usage:' in out
    assert not Path('/vault/store.json').exists()


def test_corrupt_store(fs, capsys):
    fs.create_file('/vault/store.json', contents='nope')
    assert cli.main(['-d', '/vault', 'list-notes', '-u', 'alice']) == 1
    out, err = capsys.readouterr()
    assert out.startswith('error: Store file is not a valid store [/vault/store.json]')


def test_unusable_data_dir(fs, capsys):
    fs.create_file('/vault')
    assert cli.main(['-d', '/vault', 'list-notes', '-u', 'alice']) == 1
    out, err = capsys.readouterr()
    assert out.startswith('error: Cannot create data directory [/vault]')


def test_help(fs, capsys):
    assert cli.main(['help']) == 0
    out, err = capsys.readouterr()
    assert 'pocketvault register -u alice -p s3cr3t' in out

    assert cli.main([]) == 0
    out, err = capsys.readouterr()
    assert out.startswith('Usage:\n  pocketvault register -u alice -p s3cr3t\n')


def test_unknown_command(fs, capsys):
    with pytest.raises(SystemExit) as info:
        cli.main(['frobnicate'])
    assert info.value.code == 2
    out, err = capsys.readouterr()
    assert 'invalid choice' in err


def test_verbose(fs, capsys, mocker):
    basic_config = mocker.patch('logging.basicConfig')
    assert cli.main(['-v', '-d', '/vault', 'list-notes', '-u', 'alice']) == 0
    basic_config.assert_called_once()


def test_login_corrupt_store(fs, capsys):
    fs.create_file('/vault/store.json', contents='{"users": 5}')
    assert cli.main(['-d', '/vault', 'login', '-u', 'alice', '-p', 's3cr3t']) == 1
    out, err = capsys.readouterr()
    assert out.startswith('login failed: Store file is not a valid store [/vault/store.json]')


def test_bad_config_file(fs, capsys):
    fs.create_file(os.path.expanduser('~/.pocketvault.conf.py'), contents='conf = "/vault"')
    assert cli.main(['-d', '/vault', 'list-notes', '-u', 'alice']) == 1
    out, err = capsys.readouterr()
    assert out.startswith('error: You need to assign an instance of VaultConf')
    assert not os.path.exists('/vault')
