"""
Profile information for ssh-blog.
"""


def main(console, account):
    """ Display profile of ``account``. """
    from sshblog.blog import list_posts, fingerprint, StorageError
    from sshblog.blog.postbase import format_time
    term = console.term
    console.echo()
    console.echo(term.bold(u'Profile Information'))
    console.rule(u'=', 40)
    console.echo(u'Username: {0}'.format(account.username))
    console.echo(u'User ID: {0}'.format(account.id))
    console.echo(u'Joined: {0}'.format(format_time(account.created_at)))
    console.echo(u'Bio: {0}'.format(account.bio or u'(not set)'))
    console.echo(u'Key: {0}'.format(
        fingerprint(account.public_key) or u'(unparseable)'))
    try:
        num_posts = len(list_posts(user_id=account.id))
    except StorageError:
        console.echo(u'Total posts: (error fetching)')
    else:
        console.echo(u'Total posts: {0}'.format(num_posts))
