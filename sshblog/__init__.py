""" ssh-blog: a terminal blogging platform identified by ssh session. """
