""" Shared fixtures for ssh-blog tests. """
import base64
import io
import logging
import subprocess

import paramiko
import pytest
from blessed import Terminal

from sshblog.blog import ini
from sshblog.blog.log import SessionFilter
from sshblog.blog.output import Console
from sshblog.blog.signals import SessionSignals
from sshblog.blog.userbase import Account, AccountStore


def make_pubkey(key_type='ssh-ed25519', seed=b'\x01', comment=None):
    """ Return a well-formed public key line, its blob encodes ``key_type``. """
    msg = paramiko.Message()
    msg.add_string(key_type)
    msg.add_string(seed * 32)
    body = base64.b64encode(msg.asbytes()).decode('ascii')
    if comment:
        return u'{0} {1} {2}'.format(key_type, body, comment)
    return u'{0} {1}'.format(key_type, body)


class FakeRunner(object):
    """
    Stand-in for :func:`subprocess.run`.

    ``outputs`` maps program name to its standard output, to a tuple of
    ``(returncode, stdout)``, or to an exception instance to raise.
    Programs not listed are not found.
    """

    def __init__(self, outputs=None):
        self.outputs = outputs or {}
        self.calls = []

    def __call__(self, argv, **kwargs):
        self.calls.append((argv, kwargs))
        result = self.outputs.get(argv[0])
        if result is None:
            raise FileNotFoundError(argv[0])
        if isinstance(result, BaseException):
            raise result
        returncode, stdout = result if isinstance(result, tuple) else (0, result)
        return subprocess.CompletedProcess(argv, returncode,
                                           stdout=stdout.encode('utf8'))


class FakeOpener(object):
    """ Stand-in for :func:`open`, serving ``files`` by path. """

    def __init__(self, files=None):
        self.files = files or {}

    def __call__(self, path, mode='r'):
        if path not in self.files:
            raise FileNotFoundError(path)
        return io.StringIO(self.files[path])


class FakeSignals(object):
    """ Fixed session signals, counting how often each is gathered. """

    def __init__(self, client_key=None, username=None, remote=False,
                 authorized_key=None):
        self.client_key = client_key
        self.username = username
        self.remote = remote
        self.authorized_key = authorized_key
        self.calls = {'client_key': 0, 'username': 0, 'remote': 0}

    def resolve_client_key(self):
        self.calls['client_key'] += 1
        return self.client_key

    def resolve_current_username(self):
        self.calls['username'] += 1
        return self.username

    def session_looks_remote(self):
        self.calls['remote'] += 1
        return self.remote

    def authorized_keys(self, username):
        return self.authorized_key


@pytest.fixture(autouse=True)
def cfg(tmp_path, monkeypatch):
    """ Default configuration, with databases in a temporary folder. """
    config = ini.init_bbs_ini()
    config.set('system', 'datapath', str(tmp_path / 'data'))
    monkeypatch.setattr(ini, 'CFG', config)
    return config


@pytest.fixture
def isolated_logging():
    """ Undo changes made to the logging system by ``fileConfig``. """
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for name in ('sqlitedict', 'paramiko'):
        logger = logging.getLogger(name)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.propagate = True
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
        for _filter in [_filter for _filter in handler.filters
                        if isinstance(_filter, SessionFilter)]:
            handler.removeFilter(_filter)
    root.setLevel(level)


@pytest.fixture
def store():
    return AccountStore()


@pytest.fixture
def alice_key():
    return make_pubkey(seed=b'\x0a', comment='alice@host')


@pytest.fixture
def alice(store, alice_key):
    return store.create(Account(username='alice', public_key=alice_key,
                                bio='hello'))


@pytest.fixture
def make_console():
    """ Factory of consoles answering prompts with the given lines. """
    def factory(*lines):
        term = Terminal(stream=io.StringIO(), force_styling=None)
        stdin = io.StringIO(u''.join(u'{0}\n'.format(line)
                                     for line in lines))
        return Console(term=term, stdin=stdin, stderr=io.StringIO())
    return factory


@pytest.fixture
def make_signals():
    """ Factory of :class:`SessionSignals` over fake sources. """
    def factory(environ=None, outputs=None, files=None, timeout=2):
        runner = FakeRunner(outputs)
        signals = SessionSignals(environ=dict(environ or {}),
                                 runner=runner,
                                 timeout=timeout,
                                 opener=FakeOpener(files))
        return signals
    return factory


def output_of(console):
    """ Return everything displayed on ``console`` so far. """
    return console.term.stream.getvalue()
