"""
Identity resolution for ssh-blog.

A connecting user is identified without a password, from the signals of
their ssh session (see :mod:`sshblog.blog.signals`).  Strategies are tried
in a fixed order, each a function of ``(snapshot, store)`` returning an
:class:`Outcome`: either resolved, with the account, or declined, with the
reason.  The first resolved outcome wins.  A :class:`StorageError` is
fatal and is never caught here.

The automated strategies, in order:

1. :func:`by_client_key`, the client's key is stored exactly as given.
2. :func:`by_verified_username`, the current username is registered and
   the client's key matches the stored key.
3. :func:`by_remote_session`, the current username is registered and the
   process runs inside a remote ssh session; the key is not verified.
   Enabled by ``[auth] trust_remote_session``.

When all decline, :meth:`Resolver.authenticate` continues with
:func:`by_username_only` (``[auth] username_fallback``), and finally
offers registration as decided by the ``[auth] registration`` policy.
"""
# std imports
import collections
import logging

# local
from sshblog.blog.ini import get_ini
from sshblog.blog.exception import (
    AccountNotFound,
    AuthenticationExhausted,
    KeyMismatch,
    SignalUnavailable,
    ValidationError,
)
from sshblog.blog.pubkey import fingerprint, keys_match
from sshblog.blog.register import register
from sshblog.blog.userbase import Account

#: result of a single strategy.  ``reason`` describes how an account was
#: resolved, or is the exception instance describing why it was declined.
Outcome = collections.namedtuple('Outcome', ['resolved', 'account', 'reason'])

#: placeholder key of accounts created by development mode.
DEV_KEY_FMT = ('ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQC7 '
               '{username}@dev-key')

_UNSET = object()


def resolved(account, reason):
    """ Return :class:`Outcome` of a strategy resolving ``account``. """
    return Outcome(resolved=True, account=account, reason=reason)


def declined(reason):
    """ Return :class:`Outcome` of a strategy declining by ``reason``. """
    return Outcome(resolved=False, account=None, reason=reason)


class SignalSnapshot(object):

    """
    Session signals of a single authentication attempt.

    Each signal is gathered from ``signals`` on first use and at most once,
    so that all strategies of one attempt agree on what was presented.
    A new snapshot is made for every attempt.
    """

    def __init__(self, signals):
        self.signals = signals
        self._client_key = _UNSET
        self._username = _UNSET
        self._remote = _UNSET

    @property
    def client_key(self):
        """ Public key presented by the client, or None. """
        if self._client_key is _UNSET:
            self._client_key = self.signals.resolve_client_key()
        return self._client_key

    @property
    def username(self):
        """ Current username of the session, or None. """
        if self._username is _UNSET:
            self._username = self.signals.resolve_current_username()
        return self._username

    @property
    def remote(self):
        """ Whether the session looks like a remote ssh session. """
        if self._remote is _UNSET:
            self._remote = self.signals.session_looks_remote()
        return self._remote


def _lookup_current_user(snapshot, store):
    """ Return ``(account, outcome)``, outcome is None when account found. """
    if not snapshot.username:
        return None, declined(SignalUnavailable(
            'Could not determine current user'))
    account = store.lookup_by_username(snapshot.username)
    if account is None:
        return None, declined(AccountNotFound(
            'no account for username {0!r}'.format(snapshot.username),
            username=snapshot.username))
    return account, None


def by_client_key(snapshot, store):
    """ Resolve the account stored under exactly the client's key. """
    if not snapshot.client_key:
        return declined(SignalUnavailable(
            'Could not determine SSH client key'))
    account = store.lookup_by_key(snapshot.client_key)
    if account is None:
        return declined(AccountNotFound('no account for key {0}'.format(
            fingerprint(snapshot.client_key) or '(unparseable)')))
    return resolved(account, 'public key')


def by_verified_username(snapshot, store):
    """ Resolve the current user's account if the client's key matches. """
    account, outcome = _lookup_current_user(snapshot, store)
    if outcome is not None:
        return outcome
    if not snapshot.client_key:
        return declined(SignalUnavailable(
            'Could not determine SSH client key to verify {0!r}'
            .format(account.username)))
    if not keys_match(account.public_key, snapshot.client_key):
        return declined(KeyMismatch(
            'key {0} does not match key of {1!r}'.format(
                fingerprint(snapshot.client_key) or '(unparseable)',
                account.username)))
    return resolved(account, 'username and matching public key')


def by_remote_session(snapshot, store):
    """
    Resolve the current user's account, trusting a remote ssh session.

    The client's key is not verified: this is for ssh servers that do not
    make the client's key available to the session.
    """
    account, outcome = _lookup_current_user(snapshot, store)
    if outcome is not None:
        return outcome
    if not snapshot.remote:
        return declined(SignalUnavailable(
            'no remote session indicator to trust for {0!r}'
            .format(account.username)))
    return resolved(account, 'remote session without key verification')


def by_username_only(snapshot, store):
    """
    Resolve the current user's account without requiring a key.

    A key need not be presented, but a presented key contradicting the
    stored key is still refused.
    """
    account, outcome = _lookup_current_user(snapshot, store)
    if outcome is not None:
        return outcome
    if (snapshot.client_key and
            not keys_match(account.public_key, snapshot.client_key)):
        return declined(KeyMismatch(
            'presented key {0} contradicts key of {1!r}'.format(
                fingerprint(snapshot.client_key) or '(unparseable)',
                account.username)))
    return resolved(account, 'username only')


def run_strategies(strategies, snapshot, store):
    """
    Try each of ``strategies`` in order, returning the first resolved.

    Returns the last declined :class:`Outcome` when none resolve.
    """
    log = logging.getLogger(__name__)
    outcome = declined(AccountNotFound('no strategies'))
    for strategy in strategies:
        outcome = strategy(snapshot, store)
        if outcome.resolved:
            level = (logging.WARNING
                     if strategy in (by_remote_session, by_username_only)
                     else logging.INFO)
            log.log(level, 'authenticated {0!r} by {1}.'.format(
                outcome.account.username, outcome.reason))
            return outcome
        log.info('{0} declined: {1}'.format(strategy.__name__,
                                            outcome.reason))
    return outcome


def decide_prompt(console):
    """ Registration policy asking the user at ``console``. """
    return console.prompt_yesno


def decide_allow(_):
    """ Registration policy always registering, for unattended sessions. """
    return lambda question: True


def decide_deny(_):
    """ Registration policy never registering. """
    return lambda question: False


REGISTRATION_POLICIES = {
    'prompt': decide_prompt,
    'allow': decide_allow,
    'deny': decide_deny,
}


def get_registration_policy(console, name=None):
    """
    Return callable deciding whether to offer registration.

    The callable receives the question and returns True, False, or None
    when the answer was not understood.
    """
    name = name or get_ini(section='auth', key='registration') or 'prompt'
    try:
        return REGISTRATION_POLICIES[name](console)
    except KeyError:
        raise ValueError('Unknown registration policy {0!r}, expected '
                         'one of {1}'.format(
                             name, ', '.join(sorted(REGISTRATION_POLICIES))))


class Resolver(object):

    """
    Resolve the account of the connecting user.

    :param store: :class:`~sshblog.blog.userbase.AccountStore` instance.
    :param signals: :class:`~sshblog.blog.signals.SessionSignals` instance.
    :param console: :class:`~sshblog.blog.output.Console` instance.
    :param callable decide: registration policy, see
        :func:`get_registration_policy`, by default that of configuration.
    :param bool trust_remote_session: enable :func:`by_remote_session`.
    :param bool username_fallback: enable :func:`by_username_only`
        after the automated pass declines.
    """

    def __init__(self, store, signals, console, decide=None,
                 trust_remote_session=None, username_fallback=None):
        self.log = logging.getLogger(__name__)
        self.store = store
        self.signals = signals
        self.console = console
        self.decide = decide or get_registration_policy(console)
        if trust_remote_session is None:
            trust_remote_session = get_ini(section='auth',
                                           key='trust_remote_session',
                                           getter='getboolean')
        if username_fallback is None:
            username_fallback = get_ini(section='auth',
                                        key='username_fallback',
                                        getter='getboolean')
        self.username_fallback = username_fallback
        self.strategies = [by_client_key, by_verified_username]
        if trust_remote_session:
            self.strategies.append(by_remote_session)

    def authenticate_from_session(self, snapshot=None):
        """
        Resolve account by automated strategies only.

        :raises SignalUnavailable: current username could not be determined.
        :raises AccountNotFound: every strategy declined.
        :rtype: Account
        """
        snapshot = snapshot or SignalSnapshot(self.signals)
        outcome = run_strategies(self.strategies, snapshot, self.store)
        if outcome.resolved:
            return outcome.account
        if not snapshot.username:
            raise SignalUnavailable('Could not determine current user')
        raise AccountNotFound(
            "User '{0}' not found or SSH key verification failed. "
            "Please register first.".format(snapshot.username),
            username=snapshot.username)

    def authenticate(self):
        """
        Resolve account by every means, finally offering registration.

        :raises AuthenticationExhausted: every avenue failed.
        :raises StorageError: the account database failed.
        :rtype: Account
        """
        snapshot = SignalSnapshot(self.signals)
        try:
            return self.authenticate_from_session(snapshot)
        except (AccountNotFound, SignalUnavailable) as err:
            self.console.error(u'SSH authentication failed: {0}'.format(err))

        if self.username_fallback:
            outcome = run_strategies([by_username_only], snapshot, self.store)
            if outcome.resolved:
                return outcome.account

        answer = self.decide(u'No existing user found. '
                             u'Would you like to register? (y/n)')
        if answer:
            try:
                return self.register()
            except ValidationError as err:
                raise AuthenticationExhausted(
                    'Registration failed: {0}'.format(err)) from err

        raise AuthenticationExhausted('Authentication failed. Please register '
                                      'first or contact admin.')

    def register(self):
        """
        Interactively register a new account.

        :raises RegistrationError: invalid input or account already exists.
        :rtype: Account
        """
        return register(self.store, self.console, signals=self.signals)

    def authenticate_dev_mode(self):
        """
        Resolve account by username only, creating one if necessary.

        For development and testing only: no key is verified, and an
        unknown user receives a new account with a placeholder key.
        """
        username = self.signals.resolve_current_username()
        if username:
            account = self.store.lookup_by_username(username)
            if account is not None:
                self.log.warning('development mode: authenticated {0!r}.'
                                 .format(username))
                return account
        username = username or 'dev_user'
        self.log.warning('development mode: creating account {0!r}.'
                         .format(username))
        return self.store.create(Account(
            username=username,
            public_key=DEV_KEY_FMT.format(username=username),
            bio=u'Development user'))


def get_resolver(console=None):
    """ Return :class:`Resolver` of the default store, signals and console. """
    from sshblog.blog.output import Console
    from sshblog.blog.signals import SessionSignals
    from sshblog.blog.userbase import AccountStore
    return Resolver(store=AccountStore(),
                    signals=SessionSignals(),
                    console=console or Console())


def authenticate(console=None):
    """
    Resolve the account of the connecting user.

    :raises AuthenticationExhausted: every avenue failed.
    :raises StorageError: the account database failed.
    :rtype: Account
    """
    return get_resolver(console).authenticate()


def register_account(console=None):
    """
    Interactively register a new account.

    :raises RegistrationError: invalid input or account already exists.
    :rtype: Account
    """
    return get_resolver(console).register()
