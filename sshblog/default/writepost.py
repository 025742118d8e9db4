"""
Write new blog posts for ssh-blog.
"""
#: content is terminated by a line containing only this text
END_OF_CONTENT = u'.'

#: display a progress note every this many lines of content
PROGRESS_LINES = 10


def read_content(console):
    """ Read post content up to the end-of-content line. """
    lines = []
    while True:
        line = console.readline()
        if line.strip() == END_OF_CONTENT:
            break
        lines.append(line)
        if len(lines) % PROGRESS_LINES == 0:
            console.echo(console.term.bold_black(
                u'({0} lines written...)'.format(len(lines))))
    return u'\n'.join(lines).strip()


def main(console, account):
    """ Prompt for and save a new post by ``account``. """
    from sshblog.blog import Post, StorageError
    term = console.term
    console.echo()
    console.echo(term.bold(u'Create New Post'))
    console.rule(u'=', 40)
    title = console.readline(u'Title: ').strip()
    if not title:
        console.echo(term.red(u'Title cannot be empty'))
        return None

    console.echo()
    console.echo(u"Content (end with a line containing only '{0}'):"
                 .format(END_OF_CONTENT))
    console.rule(u'-', 40)
    content = read_content(console)
    if not content:
        console.echo(term.red(u'Content cannot be empty'))
        return None

    try:
        post = Post.by(account, title=title, content=content).save()
    except StorageError as err:
        console.echo(term.red(u'Error creating post: {0}'.format(err)))
        return None
    console.echo(term.green(u"Post '{0}' created successfully!"
                            .format(post.title)))
    console.echo(u'Post ID: {0}'.format(post.idx))
    return post
