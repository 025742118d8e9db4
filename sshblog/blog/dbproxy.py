""" Database proxy helper for ssh-blog. """
# std imports
import logging
import sqlite3

# local
from sshblog.blog.ini import get_ini
from sshblog.blog.exception import StorageError
from sshblog.db import (
    get_db_filepath,
    get_database,
    get_db_func,
    get_db_lock,
    log_db_cmd,
)

#: methods of :class:`sqlitedict.SqliteDict` returning generators, which
#: must be exhausted before the database is closed.
ITERABLE_METHODS = ('keys', 'values', 'items')


class DBProxy(object):

    """
    Provide dictionary-like object interface to shared database.

    Each method call opens the database file of ``schema``, issues the
    command against ``table`` and closes it again.  Using the proxy as a
    context manager holds the lock of ``(schema, table)`` for the duration,
    serializing writers.
    """

    def __init__(self, schema, table='unnamed'):
        """
        Class initializer.

        :param str schema: database key, becomes basename of .sqlite3 file.
        :param str table: optional database table.
        """
        self.log = logging.getLogger(__name__)
        self.schema = schema
        self.table = table
        self._tap_db = get_ini('session', 'tap_db', getter='getboolean')
        self._lock = None

    def proxy_method(self, method, *args):
        """ Proxy for direct dictionary method calls. """
        try:
            dictdb = get_database(filepath=get_db_filepath(self.schema),
                                  table=self.table)
        except (sqlite3.Error, OSError) as err:
            raise StorageError('{0}/{1}: {2}'.format(
                self.schema, self.table, err)) from err
        try:
            func = get_db_func(dictdb, method)
            if self._tap_db:
                log_db_cmd(self.log, self.schema, method, args)
            result = func(*args)
            if method in ITERABLE_METHODS:
                result = list(result)
            return result
        except (sqlite3.Error, OSError) as err:
            raise StorageError('{0}/{1}.{2}: {3}'.format(
                self.schema, self.table, method, err)) from err
        finally:
            dictdb.close()

    def acquire(self):
        """
        Acquire system-wide lock on database, shared by every process.

        :raises StorageError: the lock file could not be opened or locked.
        """
        assert self._lock is None, ('lock already held', self.schema,
                                    self.table)
        lock = get_db_lock(schema=self.schema, table=self.table)
        if self._tap_db:
            self.log.debug('lock acquire schema=%s, table=%s',
                           self.schema, self.table)
        try:
            lock.acquire()
        except OSError as err:
            raise StorageError('{0}/{1}: lock {2}: {3}'.format(
                self.schema, self.table, lock.filepath, err)) from err
        self._lock = lock

    def release(self):
        """ Release system-wide lock on database. """
        if self._tap_db:
            self.log.debug('lock release schema=%s, table=%s',
                           self.schema, self.table)
        lock, self._lock = self._lock, None
        lock.release()

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.release()

    # pylint: disable=C0111
    #        Missing docstring
    def __contains__(self, key):
        return self.proxy_method('__contains__', key)
    __contains__.__doc__ = dict.__contains__.__doc__

    def __getitem__(self, key):
        return self.proxy_method('__getitem__', key)
    __getitem__.__doc__ = dict.__getitem__.__doc__

    def __setitem__(self, key, value):
        return self.proxy_method('__setitem__', key, value)
    __setitem__.__doc__ = dict.__setitem__.__doc__

    def __delitem__(self, key):
        return self.proxy_method('__delitem__', key)
    __delitem__.__doc__ = dict.__delitem__.__doc__

    def get(self, key, default=None):
        return self.proxy_method('get', key, default)
    get.__doc__ = dict.get.__doc__

    def __len__(self):
        return self.proxy_method('__len__')
    __len__.__doc__ = dict.__len__.__doc__

    def keys(self):
        return self.proxy_method('keys')
    keys.__doc__ = dict.keys.__doc__

    def values(self):
        return self.proxy_method('values')
    values.__doc__ = dict.values.__doc__

    def items(self):
        return self.proxy_method('items')
    items.__doc__ = dict.items.__doc__
