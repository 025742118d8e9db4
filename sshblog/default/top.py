"""
Main menu for ssh-blog.

This script is the session entry point once the connecting user has been
authenticated, see :func:`sshblog.engine.run_session`.
"""
# std imports
import collections
import logging

log = logging.getLogger(__name__)

#: structure of a menu entry
MenuItem = collections.namedtuple('MenuItem', ['inp_key', 'text'])


def get_menu_items():
    """ Return list of :class:`MenuItem` of the main menu. """
    return [MenuItem(inp_key=u'1', text=u'Create new post'),
            MenuItem(inp_key=u'2', text=u'View my posts'),
            MenuItem(inp_key=u'3', text=u'View all posts'),
            MenuItem(inp_key=u'4', text=u'Profile info'),
            MenuItem(inp_key=u'5', text=u'Exit')]


def display_menu(console, account, menu_items):
    """ Display main menu. """
    from sshblog.blog import get_ini
    term = console.term
    bbsname = get_ini(section='system', key='bbsname') or u'SSH Blog'
    console.echo()
    console.echo(u'{0} - Welcome {1}!'.format(
        term.bold(bbsname), term.bold_magenta(account.username)))
    for item in menu_items:
        console.echo(u'{0}. {1}'.format(term.magenta(item.inp_key),
                                        item.text))


def main(console, account):
    """ Main procedure, returns when the user chooses to exit. """
    from sshblog.default import writepost, readposts, profile
    menu_items = get_menu_items()
    dispatch = {
        u'1': lambda: writepost.main(console, account),
        u'2': lambda: readposts.main(console, account, mine=True),
        u'3': lambda: readposts.main(console, account),
        u'4': lambda: profile.main(console, account),
    }
    while True:
        display_menu(console, account, menu_items)
        choice = console.readline(
            u'Choose an option (1-{0}): '.format(len(menu_items))).strip()
        if choice == menu_items[-1].inp_key:
            console.echo(u'Thanks for using SSH Blog Platform! Goodbye!')
            log.info('{0!r} logged off.'.format(account.username))
            return
        if choice not in dispatch:
            console.echo(console.term.red(
                u'Invalid option. Please choose 1-{0}.'
                .format(len(menu_items))))
            continue
        dispatch[choice]()
