"""
New user account registration for ssh-blog.

Prompts for username, public key and an optional bio, validates them,
and creates the account.
"""
# std imports
import logging

# local
from sshblog.blog.ini import get_ini
from sshblog.blog.exception import ValidationError
from sshblog.blog.pubkey import get_key_prefix
from sshblog.blog.userbase import Account

log = logging.getLogger(__name__)

#: minimum length of usernames when not configured
DEFAULT_MIN_USER = 3


def validate_username(store, username):
    """
    Validate new ``username``.

    :raises ValidationError: username too short or already registered.
    """
    min_user = (get_ini(section='nua', key='min_user', getter='getint')
                or DEFAULT_MIN_USER)
    if len(username) < min_user:
        raise ValidationError(
            'username', u'Username must be at least {0} characters long'
            .format(min_user))
    if store.lookup_by_username(username) is not None:
        raise ValidationError('username',
                              u'User by this name already exists.')


def validate_public_key(public_key):
    """
    Validate new ``public_key``.

    :raises ValidationError: key does not begin with the key type prefix.
    """
    if not public_key.startswith(get_key_prefix()):
        raise ValidationError('public_key', u'Invalid SSH key format')


def register_user(store, username, public_key, bio=None):
    """
    Validate and create a new account without prompting.

    :raises ValidationError: any field fails validation.
    :raises DuplicateAccount: username or key registered meanwhile.
    :rtype: Account
    """
    username, public_key = username.strip(), public_key.strip()
    bio = (bio or u'').strip() or None
    validate_username(store, username)
    validate_public_key(public_key)
    return store.create(Account(username=username,
                                public_key=public_key,
                                bio=bio))


def register(store, console, signals=None):
    """
    Interactively register and return a new account.

    When ``signals`` is given, the first key of the user's authorized_keys
    file is offered as the default public key.

    :raises ValidationError: any field fails validation.
    :raises DuplicateAccount: username or key registered meanwhile.
    :rtype: Account
    """
    username = console.prompt(u'Enter your desired username:').strip()
    validate_username(store, username)

    default_key = signals.authorized_keys(username) if signals else None
    question = u'Enter your SSH public key:'
    if default_key:
        question = (u'Enter your SSH public key (press Enter to use '
                    u'the key found in authorized_keys):')
    public_key = console.prompt(question).strip() or default_key or u''
    validate_public_key(public_key)

    bio = console.prompt(
        u'Enter your bio (optional, press Enter to skip):').strip()

    account = register_user(store, username, public_key, bio)
    log.info('registered {0!r} interactively.'.format(account.username))
    return account
