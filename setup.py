#!/usr/bin/env python3
import sys

from setuptools import setup

from cloudsync import __version__ as VERSION

if sys.version_info < (3, 8):
    sys.exit('Python 3.8 is required to run cloudsync')

setup(
    name='cloudsync',
    version=VERSION,
    license='GPL-3',
    packages=[
        'cloudsync',
        'cloudsync.util',
        'cloudsync.util.wine',
    ],
    entry_points={
        'console_scripts': [
            'cloudsync=cloudsync.command:main',
        ],
    },
    zip_safe=False,
    python_requires='>=3.8',
    install_requires=[
        'PyYAML',
        'requests',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    description='Save game backup and cloud synchronization',
    long_description="""cloudsync backs up the saves of your games with ludusavi,
    packs them in an archive and uploads the archive to your cloud storage,
    whether the games run natively or through Wine.""",
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: End Users/Desktop',
        'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
        'Programming Language :: Python',
        'Operating System :: OS Independent',
        'Topic :: Games/Entertainment',
        'Topic :: System :: Archiving :: Backup',
    ],
)
