""" top-level scripting module for ssh-blog. """
# local/exported at top-level 'from sshblog.blog import ...'
from sshblog.blog.ini import get_ini
from sshblog.blog.exception import (
    AccountNotFound,
    AuthenticationExhausted,
    BlogError,
    Disconnected,
    DuplicateAccount,
    KeyMismatch,
    RegistrationError,
    SignalUnavailable,
    StorageError,
    ValidationError,
)
from sshblog.blog.dbproxy import DBProxy
from sshblog.blog.pubkey import keys_match, fingerprint
from sshblog.blog.userbase import Account, AccountStore
from sshblog.blog.signals import SessionSignals
from sshblog.blog.output import Console
from sshblog.blog.register import register_user
from sshblog.blog.identity import (
    Resolver,
    authenticate,
    register_account,
)
from sshblog.blog.postbase import Post, get_post, list_posts

# the scripting API is generally defined by this __all__ attribute, but
# the real purpose of __all__ is defining what gets placed into a caller's
# namespace when using statement `from sshblog.blog import *`
__all__ = ('get_ini', 'AccountNotFound', 'AuthenticationExhausted',
           'BlogError', 'Disconnected', 'DuplicateAccount', 'KeyMismatch',
           'RegistrationError', 'SignalUnavailable', 'StorageError',
           'ValidationError', 'DBProxy', 'keys_match', 'fingerprint',
           'Account', 'AccountStore', 'SessionSignals', 'Console',
           'register_user', 'Resolver', 'authenticate',
           'register_account', 'Post', 'get_post', 'list_posts',
           )
