""" Default interactive scripts of ssh-blog: main menu, posts, profile. """
