""" Blog post database package for ssh-blog. """
# std imports
import datetime
import logging

# local
from sshblog.blog.dbproxy import DBProxy

# 3rd party
import dateutil.tz

POSTDB = 'postbase'
POSTS_TABLE = 'posts'

#: display format of post and account timestamps
TIME_FMT = '%Y-%m-%d %H:%M UTC'


def format_time(tm_value):
    """ Return timezone-aware ``tm_value`` formatted in UTC. """
    return tm_value.astimezone(dateutil.tz.tzutc()).strftime(TIME_FMT)


def get_post(idx=0):
    """ Return Post record instance by index ``idx``. """
    return DBProxy(POSTDB, POSTS_TABLE)['%d' % int(idx)]


def list_posts(user_id=None):
    """
    Return posts, newest first.

    :param int user_id: only posts written by this account, when given.
    :rtype: list
    """
    posts = DBProxy(POSTDB, POSTS_TABLE).values()
    if user_id is not None:
        posts = [post for post in posts if post.user_id == user_id]
    return sorted(posts, key=lambda post: (post.created_at, post.idx),
                  reverse=True)


class Post(object):

    """
    A blog post record.

    - ``user_id`` and ``author_username`` identify the author's account.

    - ``title`` and ``content`` are the post itself.

    - ``created_at`` and ``updated_at`` are equal when the post is saved.
    """

    def __init__(self, user_id, title=u'', content=u'', author_username=None):
        now = datetime.datetime.now(dateutil.tz.tzutc())
        self.idx = None
        self.user_id = user_id
        self.author_username = author_username
        self.title = title
        self.content = content
        self.created_at = now
        self.updated_at = now

    @classmethod
    def by(cls, account, title=u'', content=u''):
        """ Return new Post authored by ``account``. """
        return cls(user_id=account.id, title=title, content=content,
                   author_username=account.username)

    @property
    def edited(self):
        """ Whether the post was updated after it was created. """
        return self.updated_at != self.created_at

    def save(self):
        """ Save new post to database, assigning ``idx``. """
        log = logging.getLogger(__name__)
        assert self.idx is None, ('post already saved', self.idx)
        assert self.title, ('title must be non-zero length')
        assert self.content, ('content must be non-zero length')
        with DBProxy(POSTDB, POSTS_TABLE) as db_post:
            self.idx = max(map(int, db_post.keys()), default=0) + 1
            db_post['%d' % (self.idx,)] = self
        log.info(u"saved new post {self.idx} by {self.author_username!r}, "
                 u"{self.title!r}.".format(self=self))
        return self
