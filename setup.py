#! /usr/bin/env python
""" Distribution file for ssh-blog. """
import os

from setuptools import setup

HERE = os.path.dirname(__file__)
README = 'README.rst'


setup(name='sshblog',
      version='0.1.0',
      description=("Terminal blogging platform identifying users by "
                   "their ssh session"),
      long_description=open(os.path.join(HERE, README)).read(),
      keywords="ssh terminal blog authorized_keys forcecommand",
      license='ISC',
      packages=['sshblog', 'sshblog.blog', 'sshblog.default'],
      python_requires='>=3.8',
      install_requires=[
          'blessed>=1.17.8,<2',
          'paramiko>=2.7.1',
          'python-dateutil>=2.8.1,<3',
          'sqlitedict>=1.6.0,<3',
      ],
      extras_require={
          'test': (
              'pytest>=6',
          )
      },
      entry_points={
          'console_scripts': ['sshblog=sshblog.engine:main'],
      },
      classifiers=[
          'Environment :: Console',
          'Intended Audience :: System Administrators',
          'License :: OSI Approved :: ISC License (ISCL)',
          'Natural Language :: English',
          'Operating System :: MacOS :: MacOS X',
          'Operating System :: POSIX :: BSD',
          'Operating System :: POSIX :: Linux',
          'Operating System :: POSIX',
          'Programming Language :: Python :: 3',
          'Topic :: Communications :: BBS',
          'Topic :: Internet',
          'Topic :: Terminals',
      ],
      )
