#! /usr/bin/env python

from nsqpub import __version__

extra = {}

from setuptools import setup


setup(name               = 'nsqpub',
    version              = __version__,
    description          = 'Publish to NSQ With Pure Sockets',
    license              = "MIT License",
    keywords             = 'nsq, queue, publish',
    packages             = ['nsqpub'],
    package_dir          = {'nsqpub': 'nsqpub'},
    classifiers          = [
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Intended Audience :: Developers',
        'Operating System :: OS Independent'
    ],
    install_requires=[
        'decorator',
        'six'
    ],
    extras_require={
        'test': [
            'mock',
            'pytest'
        ]
    },
    **extra
)
