"""
Read blog posts for ssh-blog.
"""


def display_post(console, post, show_author=False):
    """ Display full post. """
    from sshblog.blog import get_ini
    from sshblog.blog.postbase import format_time
    term = console.term
    number_lines = (get_ini(section='post', key='number_lines',
                            getter='getint') or 20)
    console.rule(u'-', 50)
    console.echo(term.bold(post.title))
    if show_author:
        if post.author_username:
            console.echo(u'Author: {0}'.format(post.author_username))
        else:
            console.echo(u'Author ID: {0}'.format(post.user_id))
    console.echo(u'Created: {0}'.format(format_time(post.created_at)))
    if post.edited:
        console.echo(u'Updated: {0}'.format(format_time(post.updated_at)))
    console.rule(u'-', 50)

    lines = post.content.splitlines()
    if len(lines) > number_lines:
        for num, line in enumerate(lines, 1):
            console.echo(u'{0:3}: {1}'.format(num, line))
    else:
        console.echo(post.content)
    console.rule(u'-', 50)


def main(console, account, mine=False):
    """ List posts of ``account`` when ``mine``, otherwise all posts. """
    from sshblog.blog import list_posts, StorageError
    term = console.term
    console.echo()
    console.echo(term.bold(u'Your Posts' if mine else u'All Posts'))
    console.rule(u'=', 50)
    try:
        posts = list_posts(user_id=account.id if mine else None)
    except StorageError as err:
        console.echo(term.red(u'Error fetching posts: {0}'.format(err)))
        return
    if not posts:
        if mine:
            console.echo(u'No posts yet. Create your first post!')
            console.echo(u'Choose option 1 from the main menu '
                         u'to get started.')
        else:
            console.echo(u'No posts available on the platform yet.')
            console.echo(u'Be the first to create a post!')
        return

    console.echo(u'Found {0} post(s){1}'.format(
        len(posts), u'' if mine else u' on the platform'))
    for num, post in enumerate(posts, 1):
        console.echo()
        console.echo(u'Post #{0}'.format(num))
        display_post(console, post, show_author=not mine)
