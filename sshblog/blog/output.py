""" Terminal input and output for ssh-blog. """
# std imports
import sys

# local
from sshblog.blog.exception import Disconnected

# 3rd-party
from blessed import Terminal


class Console(object):

    """
    Line-based terminal of the connected user.

    Output is written to the stream of a :class:`blessed.Terminal`, which
    also provides styling, input is read a line at a time from ``stdin``.
    """

    def __init__(self, term=None, stdin=None, stderr=None):
        self.term = term if term is not None else Terminal()
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stderr = stderr if stderr is not None else sys.stderr

    @property
    def stream(self):
        """ Output stream of terminal. """
        return self.term.stream

    def echo(self, text=u'', end=u'\n'):
        """ Display ``text``, followed by ``end``. """
        self.stream.write(u'{0}{1}'.format(text, end))
        self.stream.flush()

    def error(self, text):
        """ Display advisory message ``text`` on standard error. """
        self.stderr.write(u'{0}\n'.format(text))
        self.stderr.flush()

    def readline(self, prompt=None):
        """
        Read and return one line of input, without line terminator.

        :raises Disconnected: end of input.
        """
        if prompt:
            self.echo(prompt, end=u'')
        line = self.stdin.readline()
        if not line:
            raise Disconnected('end of input')
        return line.rstrip(u'\r\n')

    def prompt(self, question):
        """ Display ``question`` and read an answer at a ``>`` prompt. """
        self.echo(question)
        return self.readline(u'> ')

    def prompt_yesno(self, question):
        """
        Ask yes/no ``question``.

        :returns: True for yes, False for no, None when not understood.
        :rtype: bool or None
        """
        answer = self.prompt(question).strip().lower()
        if answer in (u'y', u'yes'):
            return True
        if answer in (u'n', u'no'):
            return False
        return None

    def rule(self, char=u'=', width=40):
        """ Display a horizontal rule of ``char``. """
        self.echo(self.term.bold_black(char * width))
