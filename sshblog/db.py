""" Database file and lock helpers for ssh-blog. """
# std imports
import threading
import fcntl
import os

# 3rd-party
import sqlitedict

FILELOCK = threading.Lock()

#: every (schema, table) pair created by ``--init-db``.
SCHEMAS = (
    ('userbase', 'accounts'),
    ('userbase', 'pubkeys'),
    ('postbase', 'posts'),
)


def get_database(filepath, table):
    """ Return :class:`sqlitedict.SqliteDict` instance for given database. """
    # pylint: disable=W0602
    #          Using global for 'FILELOCK' but no assignment is done
    global FILELOCK
    with FILELOCK:
        # if the program is run as root, file ownerships become read-only
        # and db transactions will throw 'read-only database' errors,
        # exit earlier if we know that file permissions are to blame
        check_db(filepath)

        dictdb = sqlitedict.SqliteDict(filename=filepath,
                                       tablename=table,
                                       autocommit=True)
    return dictdb


def check_db(filepath):
    """
    Verify permission access of given database file.

    :raises StorageError: file or folder is not accessible.
    """
    from sshblog.blog.exception import StorageError
    db_folder = os.path.dirname(filepath)
    if not os.path.exists(db_folder):
        try:
            os.makedirs(db_folder, exist_ok=True)
        except OSError as err:
            raise StorageError('Could not create db_folder {0}: {1}'
                               .format(db_folder, err))
    if not os.access(db_folder, os.F_OK | os.R_OK):
        raise StorageError('Must have rw access to db_folder: {0}'
                           .format(db_folder))
    if os.path.exists(filepath) and not os.access(
            filepath, os.F_OK | os.R_OK | os.W_OK):
        raise StorageError('Must have r+w access to db file: {0}'
                           .format(filepath))


def get_db_filepath(schema):
    """ Return filesystem path of given database ``schema``. """
    from sshblog.blog.ini import get_ini
    folder = os.path.expanduser(get_ini('system', 'datapath'))
    return os.path.join(folder, '{0}.sqlite3'.format(schema))


class FileLock(object):

    """
    Exclusive advisory lock of a file, held across processes.

    Every acquire opens the lock file anew, so two holders within one
    process exclude each other as well.
    """

    def __init__(self, filepath):
        self.filepath = filepath
        self._fobj = None

    def acquire(self):
        """ Block until the lock is held. """
        fobj = open(self.filepath, 'a')
        try:
            fcntl.flock(fobj.fileno(), fcntl.LOCK_EX)
        except OSError:
            fobj.close()
            raise
        self._fobj = fobj

    def release(self):
        """ Release the lock. """
        assert self._fobj is not None, ('lock not held', self.filepath)
        fobj, self._fobj = self._fobj, None
        try:
            fcntl.flock(fobj.fileno(), fcntl.LOCK_UN)
        finally:
            fobj.close()

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.release()


def get_db_lockpath(schema, table):
    """ Return filesystem path of lock file for ``(schema, table)``. """
    return os.path.join(os.path.dirname(get_db_filepath(schema)),
                        '{0}.{1}.lock'.format(schema, table))


def get_db_lock(schema, table):
    """
    Return database lock for given ``(schema, table)``.

    :raises StorageError: database folder is not accessible.
    """
    with FILELOCK:
        check_db(get_db_filepath(schema))
    return FileLock(get_db_lockpath(schema, table))


def get_db_func(dictdb, cmd):
    """
    Return callable function of method on ``dictdb``.

    :raises AssertionError: not a valid method or not callable.
    """
    assert hasattr(dictdb, cmd), (
        "{cmd!r} not a valid method of {db_type!r}"
        .format(cmd=cmd, db_type=type(dictdb)))
    func = getattr(dictdb, cmd)
    assert callable(func), (
        "{cmd!r} not a callable method of {db_type!r}"
        .format(cmd=cmd, db_type=type(dictdb)))
    return func


def log_db_cmd(log, schema, cmd, args):
    """ Log database command (when tap_db ini option is used). """
    s_args = '()'
    if len(args):
        s_args = '(*{0})'.format(len(args))
    log.debug('{schema}/{cmd}{args}'.format(schema=schema,
                                            cmd=cmd,
                                            args=s_args))


def init_db():
    """
    Create every database file and table used by ssh-blog.

    Returns the list of database file paths created or verified.
    """
    filepaths = []
    for schema, table in SCHEMAS:
        filepath = get_db_filepath(schema)
        get_database(filepath, table).close()
        if filepath not in filepaths:
            filepaths.append(filepath)
    return filepaths
