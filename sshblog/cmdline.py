""" Command-line parser for ssh-blog. """
import getopt
import sys
import os

USAGE = (
    'Usage: \n'
    '{0} [--config <filepath>] [--logger <filepath>]\n'
    '        [--register | --register-user <username> <ssh_key> [bio] |\n'
    '         --init-db | --dev]\n')

#: mutually exclusive commands, mapped to their number of positional
#: arguments as ``(minimum, maximum)``.
COMMANDS = {
    'session': (0, 0),
    'register': (0, 0),
    'register-user': (2, 3),
    'init-db': (0, 0),
    'dev': (0, 0),
}


def parse_args(argv=None):
    """
    Parse system arguments.

    Returns tuple of ``(lookup_bbs, lookup_log, command, arguments)``: the
    lookup paths for blog and log ini, the command to run, and its
    positional arguments.
    """
    argv = sys.argv[1:] if argv is None else argv
    prog = os.path.basename(sys.argv[0]) if sys.argv else 'sshblog'
    if sys.platform.lower().startswith('win32'):
        system_path = os.path.join('C:', 'sshblog')
    else:
        system_path = os.path.join(os.path.sep, 'etc', 'sshblog')

    lookup_bbs = (os.path.join(system_path, 'default.ini'),
                  os.path.expanduser(
                      os.path.join('~', '.sshblog', 'default.ini')))

    lookup_log = (os.path.join(system_path, 'logging.ini'),
                  os.path.expanduser(
                      os.path.join('~', '.sshblog', 'logging.ini')))

    try:
        opts, tail = getopt.gnu_getopt(argv, u'', (
            'config=', 'logger=', 'help',
            'register', 'register-user', 'init-db', 'dev'))
    except getopt.GetoptError as err:
        sys.stderr.write('{0}\n'.format(err))
        sys.stderr.write(USAGE.format(prog))
        sys.exit(1)
    command = 'session'
    for opt, arg in opts:
        if opt in ('--config',):
            lookup_bbs = (arg,)
        elif opt in ('--logger',):
            lookup_log = (arg,)
        elif opt in ('--help',):
            sys.stderr.write(USAGE.format(prog))
            sys.exit(1)
        elif command != 'session':
            sys.stderr.write('{0} may not be combined with --{1}\n'
                             .format(opt, command))
            sys.exit(1)
        else:
            command = opt[2:]
    min_args, max_args = COMMANDS[command]
    if not min_args <= len(tail) <= max_args:
        if command == 'register-user':
            sys.stderr.write('Usage: {0} --register-user <username> '
                             '<ssh_key> [bio]\n'.format(prog))
        else:
            sys.stderr.write('Unrecognized program arguments: {0}\n'
                             .format(tail))
        sys.exit(1)
    return (lookup_bbs, lookup_log, command, tail)
