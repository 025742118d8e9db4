""" Tests for the command-line launcher. """
import io
import os
import sys

import pytest

from sshblog import engine
from sshblog.blog.userbase import AccountStore

from conftest import make_pubkey

SSH_ENVIRON = ('SSH_ORIGINAL_COMMAND', 'SSH_CLIENT_KEY_FILE', 'SSH_CLIENT',
               'SSH_CONNECTION', 'USER', 'SSH_USER', 'LOGNAME', 'USERNAME')


@pytest.fixture
def home(tmp_path, monkeypatch, isolated_logging):
    """ Home folder with configuration that never runs real helpers. """
    monkeypatch.setenv('HOME', str(tmp_path))
    for name in SSH_ENVIRON:
        monkeypatch.delenv(name, raising=False)
    folder = tmp_path / '.sshblog'
    folder.mkdir()
    (folder / 'default.ini').write_text(
        u'[system]\n'
        u'datapath = {0}\n'
        u'hostname = blog.example.com\n'
        u'[auth]\n'
        u'agent_command = /nonexistent/ssh-add -L\n'
        u'whoami_command = /nonexistent/whoami\n'
        u'registration = deny\n'.format(tmp_path / 'data'))
    return tmp_path


@pytest.fixture
def run(home, monkeypatch, capfd):
    """ Run the launcher, returning its exit status, stdout and stderr. """
    def runner(*args, **kwargs):
        lines = kwargs.get('stdin', ())
        monkeypatch.setattr(sys, 'stdin', io.StringIO(
            u''.join(u'{0}\n'.format(line) for line in lines)))
        argv = ['--config={0}'.format(home / '.sshblog' / 'default.ini'),
                '--logger={0}'.format(home / '.sshblog' / 'logging.ini')]
        status = engine.main(argv + list(args))
        out, err = capfd.readouterr()
        return status, out, err
    return runner


def test_init_db(run, home):
    status, out, _ = run('--init-db')

    assert status == 0
    assert 'Database initialized successfully' in out
    assert (home / 'data' / 'userbase.sqlite3').exists()
    assert (home / 'data' / 'postbase.sqlite3').exists()
    assert (home / '.sshblog' / 'logging.ini').exists()


def test_register_user(run):
    key = make_pubkey(comment='bob@host')

    status, out, _ = run('--register-user', 'bob', key, 'hi there')

    assert status == 0
    assert 'User bob registered successfully' in out
    assert AccountStore().lookup_by_key(key).bio == 'hi there'


def test_register_user_twice(run):
    key = make_pubkey()
    run('--register-user', 'bob', key)

    status, _, err = run('--register-user', 'bob', make_pubkey(seed=b'\x02'))

    assert status == 1
    assert 'Failed to register user' in err


def test_register_interactively(run):
    key = make_pubkey(comment='carol@host')

    status, out, _ = run('--register', stdin=('carol', key, ''))

    assert status == 0
    assert 'Registration successful!' in out
    assert 'You can now connect using: ssh carol@blog.example.com' in out


def test_session_by_key_file(run, home, monkeypatch):
    key = make_pubkey(comment='alice@host')
    run('--register-user', 'alice', key, 'hello')
    key_file = home / 'client.pub'
    key_file.write_text(key)
    monkeypatch.setenv('SSH_CLIENT_KEY_FILE', str(key_file))
    monkeypatch.setenv('USER', 'alice')

    status, out, _ = run(stdin=('4', '5'))

    assert status == 0
    assert 'Welcome back, alice!' in out
    assert 'Bio: hello' in out
    assert 'Goodbye!' in out


def test_session_unknown_user(run, monkeypatch):
    monkeypatch.setenv('USER', 'nobody')

    status, out, err = run()

    assert status == 1
    assert 'Welcome to SSH Blog Platform!' in out
    assert 'SSH authentication failed' in err
    assert 'Authentication failed' in err


def test_session_disconnects(run, monkeypatch):
    run('--register-user', 'alice', make_pubkey())
    monkeypatch.setenv('USER', 'alice')

    status, out, _ = run(stdin=())

    assert status == 1
    assert 'Welcome back, alice!' in out


def test_dev_mode(run, monkeypatch):
    monkeypatch.setenv('USER', 'dana')

    status, out, _ = run('--dev', stdin=('5',))

    assert status == 0
    assert 'Development mode: authenticated as dana' in out
    assert AccountStore().lookup_by_username('dana') is not None


def test_daily_log_written(run, home):
    run('--register-user', 'bob', make_pubkey())

    assert os.path.exists(str(home / '.sshblog' / 'daily.log'))
