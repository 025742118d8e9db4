""" Configuration package ssh-blog. """
# std imports
import logging.config
import configparser
import warnings
import inspect
import socket
import os

#: Singleton representing configuration after load
CFG = None

#: value returned by :func:`get_ini` for a missing option, by getter.
EMPTY_VALUES = {'getboolean': False, 'getint': 0, 'getfloat': 0}


def init(lookup_bbs, lookup_log):
    """
    Initialize global 'CFG' variable, a singleton to contain blog settings.

    Each of ``lookup_bbs`` and ``lookup_log`` is a tuple of .ini file paths
    in order of preference.  The first existing file is loaded over the
    defaults.  When none exist, defaults are written to the last path,
    presumed to be within a folder writable by our process.
    """
    # pylint: disable=W0603
    #         Using the global statement
    global CFG
    cfg_logfile, found = find_ini(lookup_log)
    if not found:
        save_ini(init_log_ini(), cfg_logfile)
    if os.path.exists(cfg_logfile):
        logging.config.fileConfig(cfg_logfile,
                                  disable_existing_loggers=False)

    cfg_bbs = init_bbs_ini()
    cfg_bbsfile, found = find_ini(lookup_bbs)
    if found:
        cfg_bbs.read(cfg_bbsfile)
        logging.getLogger(__name__).info('loaded %s', cfg_bbsfile)
    else:
        save_ini(cfg_bbs, cfg_bbsfile)
    CFG = cfg_bbs


def find_ini(lookup):
    """
    Return ``(filepath, exists)`` for the first existing path of ``lookup``.

    When none exist, the last path is returned.
    """
    for filepath in map(os.path.expanduser, lookup):
        if os.path.exists(filepath):
            return filepath, True
    return os.path.expanduser(lookup[-1]), False


def save_ini(cfg, filepath):
    """ Write ``cfg`` to ``filepath``, creating its folder as necessary. """
    log = logging.getLogger(__name__)
    folder = os.path.dirname(filepath)
    try:
        if folder and not os.path.isdir(folder):
            os.makedirs(folder)
        with open(filepath, 'w') as fout:
            cfg.write(fout)
    except OSError as err:
        log.error('could not save {0}: {1}'.format(filepath, err))
        return False
    log.info('Saved %s', filepath)
    return True


def init_bbs_ini():
    """ Returns ConfigParser instance of blog system defaults. """
    cfg_bbs = configparser.ConfigParser(interpolation=None)

    cfg_bbs.add_section('system')
    cfg_bbs.set('system', 'bbsname', 'SSH Blog Platform')
    cfg_bbs.set('system', 'datapath', os.path.expanduser(
        os.path.join('~', '.sshblog', 'data')))
    # shown to newly registered users as the address to connect to
    cfg_bbs.set('system', 'hostname', socket.gethostname())
    cfg_bbs.set('system', 'port', '2222')

    cfg_bbs.add_section('session')
    cfg_bbs.set('session', 'tap_db', 'no')

    cfg_bbs.add_section('auth')
    # accept a username match without key verification when the process
    # runs inside a remote ssh session (SSH_CLIENT or SSH_CONNECTION set).
    cfg_bbs.set('auth', 'trust_remote_session', 'yes')
    # after the key-aware pass declines, accept any existing account
    # matching the current username without checking keys at all.
    cfg_bbs.set('auth', 'username_fallback', 'yes')
    # one of 'prompt', 'allow', or 'deny'
    cfg_bbs.set('auth', 'registration', 'prompt')
    cfg_bbs.set('auth', 'helper_timeout', '5')
    cfg_bbs.set('auth', 'key_prefix', 'ssh-')
    cfg_bbs.set('auth', 'agent_command', 'ssh-add -L')
    cfg_bbs.set('auth', 'whoami_command', 'whoami')

    # new user account
    cfg_bbs.add_section('nua')
    cfg_bbs.set('nua', 'min_user', '3')

    cfg_bbs.add_section('post')
    # posts longer than this many lines are displayed with line numbers
    cfg_bbs.set('post', 'number_lines', '20')

    return cfg_bbs


def init_log_ini():
    """ Return ConfigParser instance of logger defaults. """
    cfg_log = configparser.RawConfigParser()
    cfg_log.add_section('formatters')
    cfg_log.set('formatters', 'keys', 'default')

    cfg_log.add_section('formatter_default')
    cfg_log.set('formatter_default', 'format',
                u'%(asctime)s %(levelname)-6s '
                u'%(filename)10s:%(lineno)-3s %(message)s')
    cfg_log.set('formatter_default', 'class', 'logging.Formatter')
    cfg_log.set('formatter_default', 'datefmt', '%a-%m-%d %I:%M%p')

    cfg_log.add_section('handlers')
    cfg_log.set('handlers', 'keys', 'console, rotate_daily')

    # the console is the user's session, only warnings belong there
    cfg_log.add_section('handler_console')
    cfg_log.set('handler_console', 'class',
                'sshblog.blog.log.ColoredConsoleHandler')
    cfg_log.set('handler_console', 'level', 'WARNING')
    cfg_log.set('handler_console', 'formatter', 'default')
    cfg_log.set('handler_console', 'args', 'tuple()')

    cfg_log.add_section('handler_rotate_daily')
    cfg_log.set('handler_rotate_daily', 'class',
                'logging.handlers.TimedRotatingFileHandler')
    cfg_log.set('handler_rotate_daily', 'level', 'INFO')
    cfg_log.set('handler_rotate_daily', 'formatter', 'default')
    daily_log = os.path.join(os.path.expanduser(
        os.path.join('~', '.sshblog', 'daily.log')))
    cfg_log.set('handler_rotate_daily', 'args',
                '(' + repr(daily_log) + ', "midnight", 1, 60, "utf8")')

    cfg_log.add_section('loggers')
    cfg_log.set('loggers', 'keys', 'root, sqlitedict, paramiko')

    cfg_log.add_section('logger_root')
    cfg_log.set('logger_root', 'level', 'INFO')
    cfg_log.set('logger_root', 'handlers', 'console, rotate_daily')

    # squelch sqlitedict's info, its rather long
    cfg_log.add_section('logger_sqlitedict')
    cfg_log.set('logger_sqlitedict', 'level', 'WARNING')
    cfg_log.set('logger_sqlitedict', 'handlers', 'console, rotate_daily')
    cfg_log.set('logger_sqlitedict', 'qualname', 'sqlitedict')
    cfg_log.set('logger_sqlitedict', 'propagate', '0')

    # squelch paramiko.transport info, also too verbose
    cfg_log.add_section('logger_paramiko')
    cfg_log.set('logger_paramiko', 'level', 'WARNING')
    cfg_log.set('logger_paramiko', 'handlers', 'console, rotate_daily')
    cfg_log.set('logger_paramiko', 'qualname', 'paramiko')
    cfg_log.set('logger_paramiko', 'propagate', '0')

    return cfg_log


def get_ini(section=None, key=None, getter='get', split=False, splitsep=','):
    """
    Return option ``key`` of ini ``section``.

    ``getter`` names the ConfigParser method used, such as ``'getboolean'``
    or ``'getint'``.  With ``split``, a string value is returned as a list
    split by ``splitsep``.  A missing option is returned as the empty value
    of the requested type: False, 0, an empty list or an empty string.
    """
    assert section is not None, section
    assert key is not None, key
    if CFG is None:
        # calling get_ini before init() returns an empty value
        caller = inspect.stack()[1]
        warnings.warn('ini system not (yet) initialized, '
                      'caller = {0}:{1}'.format(caller[1], caller[3]))
    elif CFG.has_option(section, key):
        value = getattr(CFG, getter)(section, key)
        if split and isinstance(value, str):
            return [item.strip() for item in value.split(splitsep)]
        return value
    return EMPTY_VALUES.get(getter, [] if split else u'')
