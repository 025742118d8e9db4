"""
Session signal gathering for ssh-blog.

An ssh server configured to run ssh-blog as its ``ForceCommand`` leaves
traces of the connecting client in the process environment.  These are
consulted, along with an ssh agent and the local system, to determine which
public key the client presented and which username it connected as.

Environment variables consulted:

- ``SSH_ORIGINAL_COMMAND``: command requested by the client, which may
  carry the client's public key.
- ``SSH_CLIENT_KEY_FILE``: path of a file containing the client's public
  key, written by a cooperating ssh server.
- ``USER``, ``SSH_USER``, ``LOGNAME``, ``USERNAME``: the current username,
  in order of preference.
- ``SSH_CLIENT``, ``SSH_CONNECTION``: present when running inside a remote
  ssh session.
"""
# std imports
import subprocess
import logging
import shlex
import os

# local
from sshblog.blog.ini import get_ini
from sshblog.blog.pubkey import extract_public_key, looks_like_pubkey

ENV_ORIGINAL_COMMAND = 'SSH_ORIGINAL_COMMAND'
ENV_CLIENT_KEY_FILE = 'SSH_CLIENT_KEY_FILE'
ENV_USERNAMES = ('USER', 'SSH_USER', 'LOGNAME', 'USERNAME')
ENV_REMOTE_INDICATORS = ('SSH_CLIENT', 'SSH_CONNECTION')

#: conventional authorized_keys locations, in order of preference.
AUTHORIZED_KEYS_PATHS = (
    '/home/{username}/.ssh/authorized_keys',
    '/Users/{username}/.ssh/authorized_keys',
    'C:\\Users\\{username}\\.ssh\\authorized_keys',
)

#: default seconds to await an external helper command.
DEFAULT_HELPER_TIMEOUT = 5


class SessionSignals(object):

    """
    Best-effort source of the connecting client's key and username.

    Nothing is memoized, each call reflects the current environment.  No
    method raises when a source is unavailable, None is returned instead.

    :param dict environ: environment mapping, ``os.environ`` by default.
    :param callable runner: :func:`subprocess.run` compatible callable.
    :param float timeout: seconds to await external helper commands.
    :param callable opener: :func:`open` compatible callable for files.
    """

    def __init__(self, environ=None, runner=None, timeout=None, opener=None):
        self.log = logging.getLogger(__name__)
        self.environ = environ if environ is not None else os.environ
        self.runner = runner or subprocess.run
        self.timeout = (timeout if timeout is not None else
                        get_ini(section='auth', key='helper_timeout',
                                getter='getfloat') or DEFAULT_HELPER_TIMEOUT)
        self.opener = opener or open

    def run_helper(self, command):
        """
        Run external ``command``, returning its standard output.

        Returns None when the command is missing, fails, or times out.
        """
        argv = shlex.split(command)
        try:
            proc = self.runner(argv,
                               stdin=subprocess.DEVNULL,
                               stdout=subprocess.PIPE,
                               stderr=subprocess.DEVNULL,
                               timeout=self.timeout,
                               check=False)
        except subprocess.TimeoutExpired:
            self.log.warning('{0!r} timed out after {1}s.'
                             .format(command, self.timeout))
            return None
        except OSError as err:
            self.log.debug('{0!r} not available: {1}'.format(command, err))
            return None
        if proc.returncode != 0:
            self.log.debug('{0!r} exit status {1}.'
                           .format(command, proc.returncode))
            return None
        output = proc.stdout
        if isinstance(output, bytes):
            output = output.decode('utf8', 'replace')
        return output or u''

    def read_file(self, filepath):
        """ Return contents of ``filepath``, or None if it cannot be read. """
        try:
            with self.opener(filepath, 'r') as fin:
                return fin.read()
        except (IOError, OSError, UnicodeError) as err:
            self.log.debug('{0}: {1}'.format(filepath, err))
            return None

    def key_from_original_command(self):
        """ Public key embedded in the ssh original command, if any. """
        command = self.environ.get(ENV_ORIGINAL_COMMAND)
        if not command:
            return None
        return extract_public_key(command)

    def key_from_agent(self):
        """ First public key listed by the ssh agent, if any. """
        command = (get_ini(section='auth', key='agent_command')
                   or 'ssh-add -L')
        output = self.run_helper(command)
        for line in (output or u'').splitlines():
            if looks_like_pubkey(line):
                return line.strip()
        return None

    def key_from_file(self):
        """ Public key contained in the client key file, if any. """
        filepath = self.environ.get(ENV_CLIENT_KEY_FILE)
        if not filepath:
            return None
        return (self.read_file(filepath) or u'').strip() or None

    def resolve_client_key(self):
        """
        Return the public key presented by the connecting client.

        Sources are tried in fixed order: the original command, the ssh
        agent, then the client key file.  The first to yield a value wins.

        :rtype: str or None
        """
        for source in (self.key_from_original_command,
                       self.key_from_agent,
                       self.key_from_file):
            key = source()
            if key:
                self.log.debug('client key by {0}.'.format(source.__name__))
                return key
        return None

    def resolve_current_username(self):
        """
        Return the username the session is running as.

        :rtype: str or None
        """
        for name in ENV_USERNAMES:
            value = self.environ.get(name, u'').strip()
            if value:
                return value
        command = (get_ini(section='auth', key='whoami_command')
                   or 'whoami')
        return (self.run_helper(command) or u'').strip() or None

    def session_looks_remote(self):
        """ Whether a remote ssh session indicator is set, of any value. """
        return any(name in self.environ for name in ENV_REMOTE_INDICATORS)

    def authorized_keys(self, username):
        """
        Return first public key of ``username``'s authorized_keys file.

        :rtype: str or None
        """
        if not username:
            return None
        for path in AUTHORIZED_KEYS_PATHS:
            content = self.read_file(path.format(username=username))
            for line in (content or u'').splitlines():
                if looks_like_pubkey(line):
                    return line.strip()
        return None

    def remote_addr(self):
        """ Remote IP address of the ssh session, if known. """
        value = (self.environ.get('SSH_CLIENT') or
                 self.environ.get('SSH_CONNECTION') or u'')
        return value.split()[0] if value.split() else None
