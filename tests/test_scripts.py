""" Tests for the menu, post writing and reading scripts. """
import datetime

import pytest

from sshblog.blog.exception import Disconnected
from sshblog.blog.postbase import Post, list_posts
from sshblog.default import profile, readposts, top, writepost

from conftest import output_of


class TestMenu:
    def test_every_option(self, alice, make_console):
        console = make_console(
            '1', 'My title', 'first line', 'second line', '.',
            '2', '3', '4', '5')

        top.main(console, alice)

        output = output_of(console)
        assert "Post 'My title' created successfully!" in output
        assert 'Your Posts' in output
        assert 'Found 1 post(s) on the platform' in output
        assert 'Author: alice' in output
        assert 'Total posts: 1' in output
        assert 'Thanks for using SSH Blog Platform! Goodbye!' in output

    def test_invalid_option(self, alice, make_console):
        console = make_console('9', '5')

        top.main(console, alice)

        assert 'Invalid option. Please choose 1-5.' in output_of(console)

    def test_end_of_input(self, alice, make_console):
        with pytest.raises(Disconnected):
            top.main(make_console('2'), alice)

    def test_menu_items(self):
        assert [item.inp_key for item in top.get_menu_items()] == [
            u'1', u'2', u'3', u'4', u'5']


class TestWritePost:
    def test_multiline_content(self, alice, make_console):
        console = make_console('Title', 'one', '', 'three', ' . ')

        post = writepost.main(console, alice)

        assert post.content == u'one\n\nthree'
        assert 'Post ID: 1' in output_of(console)

    def test_progress_note(self, alice, make_console):
        lines = ['line {0}'.format(num) for num in range(12)]
        console = make_console('Title', *(lines + ['.']))

        writepost.main(console, alice)

        assert '(10 lines written...)' in output_of(console)

    def test_empty_title(self, alice, make_console):
        console = make_console('   ')

        assert writepost.main(console, alice) is None
        assert 'Title cannot be empty' in output_of(console)

    def test_empty_content(self, alice, make_console):
        console = make_console('Title', '', '.')

        assert writepost.main(console, alice) is None
        assert 'Content cannot be empty' in output_of(console)
        assert list_posts() == []


class TestReadPosts:
    def test_no_posts_of_mine(self, alice, make_console):
        console = make_console()

        readposts.main(console, alice, mine=True)

        assert 'No posts yet. Create your first post!' in output_of(console)

    def test_no_posts_at_all(self, alice, make_console):
        console = make_console()

        readposts.main(console, alice)

        assert 'No posts available on the platform yet.' in output_of(console)

    def test_long_post_numbered(self, alice, make_console, cfg):
        cfg.set('post', 'number_lines', '2')
        Post.by(alice, title=u'Long', content=u'a\nb\nc').save()
        console = make_console()

        readposts.main(console, alice, mine=True)

        output = output_of(console)
        assert '  1: a' in output
        assert '  3: c' in output
        assert 'Author:' not in output

    def test_short_post_unnumbered(self, alice, make_console):
        Post.by(alice, title=u'Short', content=u'a\nb').save()
        console = make_console()

        readposts.main(console, alice)

        output = output_of(console)
        assert '  1: a' not in output
        assert 'Post #1' in output
        assert 'Updated:' not in output

    def test_updated_post(self, alice, make_console):
        post = Post.by(alice, title=u'Short', content=u'text')
        post.updated_at += datetime.timedelta(hours=1)
        console = make_console()

        readposts.display_post(console, post)

        assert 'Updated: ' in output_of(console)


def test_profile(alice, make_console):
    console = make_console()

    profile.main(console, alice)

    output = output_of(console)
    assert 'Username: alice' in output
    assert 'User ID: 1' in output
    assert 'Bio: hello' in output
    assert 'Key: SHA256:' in output
    assert 'Total posts: 0' in output
