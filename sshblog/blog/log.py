"""
Logging handler for ssh-blog.
"""
import logging
import copy
import sys
from blessed import Terminal


class ColoredConsoleHandler(logging.StreamHandler):
    """
    A stream handler that colors the levelname, thats all.
    """

    def __init__(self, stream=None):
        """ Constructor class, initializes blessed Terminal. """
        stream = stream if stream is not None else sys.stderr
        self.term = Terminal(stream=stream)
        logging.StreamHandler.__init__(self, stream)

    def color_levelname(self, record):
        """ Modify levelname field to include terminal color sequences.  """
        record.levelname = (self.term.bold_red if record.levelno >= 50 else
                            self.term.bold_red if record.levelno >= 40 else
                            self.term.bold_yellow if record.levelno >= 30 else
                            self.term.bold_white if record.levelno >= 20 else
                            self.term.blue)('%-5s' % (
                                record.levelname.title()
                                if record.levelname.lower() != 'warning'
                                else 'warn',))
        return record

    def transform(self, src_record):
        """ Return a modified log record """
        return self.color_levelname(src_record)

    def emit(self, src_record):
        """ Emit record to console """
        # transform
        dst_record = self.transform(copy.copy(src_record))

        # emit to console
        logging.StreamHandler.emit(self, dst_record)


class SessionFilter(logging.Filter):
    """
    Prefix log messages with the session's handle and remote address.

    Many sessions write to the same daily log file, this makes their
    messages distinguishable.
    """

    def __init__(self, handle=None, addr=None):
        logging.Filter.__init__(self)
        self.handle = handle
        self.addr = addr

    @property
    def prefix(self):
        """ Prefix for each message, such as ``[alice@192.0.2.1]``. """
        return u'[{0}{1}]'.format(self.handle or u'-',
                                  u'@' + self.addr if self.addr else u'')

    def filter(self, record):
        # a record passes through each handler's filters, prefix only once.
        if not getattr(record, 'session_prefixed', False):
            record.msg = u'{0} {1}'.format(self.prefix, record.msg)
            record.session_prefixed = True
        return True


def install_session_filter(handle=None, addr=None):
    """ Attach a :class:`SessionFilter` to every handler of the root logger. """
    session_filter = SessionFilter(handle=handle, addr=addr)
    for handler in logging.getLogger().handlers:
        for existing in [_filter for _filter in handler.filters
                         if isinstance(_filter, SessionFilter)]:
            handler.removeFilter(existing)
        handler.addFilter(session_filter)
    return session_filter
