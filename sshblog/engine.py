#!/usr/bin/env python
""" Command-line launcher for ssh-blog. """
# std
import logging
import sys

# local
from sshblog import cmdline


def main(argv=None):
    """
    ssh-blog main entry point. The session begins and ends here.

    Command line arguments:

    - ``--config=`` location of alternate configuration file
    - ``--logger=`` location of alternate logging.ini file
    - ``--register`` register a new account interactively
    - ``--register-user <username> <ssh_key> [bio]`` register an account
    - ``--init-db`` create the database
    - ``--dev`` authenticate in development mode

    Without any command, the connecting user is authenticated and
    presented the main menu.
    """
    lookup_bbs, lookup_log, command, args = cmdline.parse_args(argv)

    # load existing .ini files or create default ones.
    import sshblog.blog.ini
    sshblog.blog.ini.init(lookup_bbs, lookup_log)

    from sshblog.blog import Console, Disconnected
    console = Console()
    handler = {
        'session': run_session,
        'register': run_register,
        'register-user': run_register_user,
        'init-db': run_init_db,
        'dev': run_dev,
    }[command]
    try:
        return handler(console, *args)
    except (KeyboardInterrupt, Disconnected):
        console.error(u'')
        return 1


def welcome(console, account):
    """ Greet authenticated ``account`` and begin the main menu. """
    from sshblog.blog.log import install_session_filter
    from sshblog.blog.signals import SessionSignals
    from sshblog.default import top
    install_session_filter(handle=account.username,
                           addr=SessionSignals().remote_addr())
    console.echo(u'Welcome back, {0}!'.format(
        console.term.bold(account.username)))
    if account.bio:
        console.echo(u'Bio: {0}'.format(account.bio))
    top.main(console, account)
    return 0


def run_session(console):
    """ Authenticate connecting user and run the main menu. """
    from sshblog.blog import (authenticate, AuthenticationExhausted,
                              StorageError)
    term = console.term
    console.echo(term.bold(u'Welcome to SSH Blog Platform!'))
    console.echo(u'Your terminal-based blogging experience starts here.')
    console.echo()
    try:
        account = authenticate(console)
    except (AuthenticationExhausted, StorageError) as err:
        logging.getLogger(__name__).warning(
            'authentication failed: {0}'.format(err))
        console.error(u'Authentication failed: {0}'.format(err))
        console.error(u'If this is your first time, contact admin to '
                      u'register your account')
        return 1
    return welcome(console, account)


def run_dev(console):
    """ Authenticate in development mode and run the main menu. """
    from sshblog.blog.identity import get_resolver
    from sshblog.blog import StorageError
    try:
        account = get_resolver(console).authenticate_dev_mode()
    except StorageError as err:
        console.error(u'Authentication failed: {0}'.format(err))
        return 1
    console.echo(u'Development mode: authenticated as {0}'
                 .format(account.username))
    return welcome(console, account)


def show_registered(console, account):
    """ Display summary of newly registered ``account``. """
    from sshblog.blog import get_ini
    term = console.term
    console.echo()
    console.echo(term.green(u'Registration successful!'))
    console.echo(u'Username: {0}'.format(account.username))
    if account.bio:
        console.echo(u'Bio: {0}'.format(account.bio))
    console.echo()
    console.echo(u'Your SSH public key has been registered.')
    console.echo(u'You can now connect using: ssh {0}@{1} -p {2}'.format(
        account.username,
        get_ini(section='system', key='hostname') or u'yourserver',
        get_ini(section='system', key='port') or u'22'))


def run_register(console):
    """ Register a new account interactively. """
    from sshblog.blog import register_account, RegistrationError
    console.echo(console.term.bold(u'SSH Blog Registration'))
    console.echo(u'Setting up your account...')
    console.echo()
    try:
        account = register_account(console)
    except RegistrationError as err:
        console.error(u'Registration failed: {0}'.format(err))
        return 1
    show_registered(console, account)
    return 0


def run_register_user(console, username, ssh_key, bio=None):
    """ Register account of ``username`` and ``ssh_key`` without prompts. """
    from sshblog.blog import (AccountStore, register_user,
                              RegistrationError, StorageError)
    try:
        register_user(AccountStore(), username, ssh_key, bio)
    except (RegistrationError, StorageError) as err:
        console.error(u'Failed to register user: {0}'.format(err))
        return 1
    console.echo(u'User {0} registered successfully'.format(username))
    return 0


def run_init_db(console):
    """ Create database files and tables. """
    from sshblog.db import init_db
    from sshblog.blog import StorageError
    try:
        filepaths = init_db()
    except StorageError as err:
        console.error(u'Failed to initialize database: {0}'.format(err))
        return 1
    for filepath in filepaths:
        logging.getLogger(__name__).info('initialized %s', filepath)
    console.echo(u'Database initialized successfully')
    return 0


if __name__ == '__main__':
    sys.exit(main())
