""" Account record database for ssh-blog. """
# std imports
import datetime
import logging

# local
from sshblog.blog.dbproxy import DBProxy
from sshblog.blog.exception import DuplicateAccount, StorageError
from sshblog.blog.pubkey import fingerprint

# 3rd-party
import dateutil.tz

USERDB = 'userbase'
ACCOUNTS_TABLE = 'accounts'
PUBKEYS_TABLE = 'pubkeys'


class Account(object):

    """
    A registered identity: unique ``username`` and ``public_key``.

    ``id`` is None until the record has been created by
    :meth:`AccountStore.create`.  An account is never modified once
    created, its attributes are read-only.
    """

    def __init__(self, username, public_key, bio=None, created_at=None):
        """ Class initializer. """
        self._id = None
        self._username = username
        self._public_key = public_key
        self._bio = bio or None
        self._created_at = created_at or datetime.datetime.now(
            dateutil.tz.tzutc())

    def __repr__(self):
        return ('Account(id={0!r}, username={1!r})'
                .format(self._id, self._username))

    def __eq__(self, other):
        if not isinstance(other, Account):
            return NotImplemented
        return (self.id, self.username, self.public_key, self.bio,
                self.created_at) == (other.id, other.username,
                                     other.public_key, other.bio,
                                     other.created_at)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    @property
    def id(self):
        """ Identifier assigned by the account store, None before saved. """
        # pylint: disable=C0103
        #         Invalid name "id"
        return self._id

    @property
    def username(self):
        """ User handle, also the database key. """
        return self._username

    @property
    def public_key(self):
        """ Public key text, as given at registration. """
        return self._public_key

    @property
    def bio(self):
        """ Optional free text about the user, None when not set. """
        return self._bio

    @property
    def created_at(self):
        """ Time of registration as timezone-aware UTC datetime. """
        return self._created_at

    def with_id(self, idx):
        """ Return a copy of this record carrying identifier ``idx``. """
        account = Account(username=self.username,
                          public_key=self.public_key,
                          bio=self.bio,
                          created_at=self.created_at)
        account._id = idx
        return account


class AccountStore(object):

    """
    Account records keyed by username, with an index of raw public keys.

    Table ``accounts`` maps username to :class:`Account`, table ``pubkeys``
    maps the raw stored key text to username.
    """

    def __init__(self, schema=USERDB):
        self.log = logging.getLogger(__name__)
        self.schema = schema

    @property
    def accounts(self):
        """ Proxy to the accounts table. """
        return DBProxy(self.schema, ACCOUNTS_TABLE)

    @property
    def pubkeys(self):
        """ Proxy to the public key index table. """
        return DBProxy(self.schema, PUBKEYS_TABLE)

    def lookup_by_username(self, username):
        """
        Return account by exact ``username``.

        :rtype: Account or None
        """
        if not username:
            return None
        return self.accounts.get(username)

    def lookup_by_key(self, public_key):
        """
        Return account stored under exactly ``public_key``.

        The raw stored text is the index key, no normalization is done.

        :rtype: Account or None
        """
        if not public_key:
            return None
        username = self.pubkeys.get(public_key)
        if username is None:
            return None
        return self.lookup_by_username(username)

    def list_accounts(self):
        """ Return all accounts, ordered by identifier. """
        return sorted(self.accounts.values(), key=lambda acct: acct.id)

    def create(self, account):
        """
        Persist new ``account`` and return it with its assigned identifier.

        :raises DuplicateAccount: username or public key already registered.
        :raises StorageError: the database could not complete the operation.
        """
        assert account.id is None, ('account already created', account)
        assert account.username, ('username must be non-zero length')
        with self.accounts as udb, self.pubkeys as kdb:
            if account.username in udb:
                raise DuplicateAccount('username', account.username)
            if account.public_key in kdb:
                raise DuplicateAccount('public_key', account.public_key)
            idx = max([_acct.id for _acct in udb.values()] or [0]) + 1
            account = account.with_id(idx)
            udb[account.username] = account
            try:
                kdb[account.public_key] = account.username
            except StorageError:
                # a create is never partially applied
                try:
                    del udb[account.username]
                except StorageError as err:
                    self.log.error('account {0!r} left without key index '
                                   'entry, removal failed: {1}'
                                   .format(account.username, err))
                raise
        self.log.info("saved new account {0!r} (id={1}, key={2}).".format(
            account.username, account.id,
            fingerprint(account.public_key) or u'(unparseable)'))
        return account
