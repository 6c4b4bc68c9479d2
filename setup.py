#!/usr/bin/env python
# vim: set sw=4 et:

from setuptools import setup, find_packages

from multimerge import __version__


def get_long_description():
    with open('README.rst', 'r') as fh:
        long_description = fh.read()
    return long_description


def load_requirements(filename):
    with open(filename, 'rt') as fh:
        requirements = fh.read().rstrip().split('\n')
    return requirements


setup(
    name='multimerge',
    version=__version__,
    url='https://github.com/sweeneyde/multimerge',
    author='Dennis Sweeney',
    author_email='sweeney.427@osu.edu',
    description='A lazy k-way merge of sorted iterables, interchangeable with heapq.merge',
    long_description=get_long_description(),
    license='MIT',
    packages=find_packages(exclude=['tests', '*.test']),
    zip_safe=False,
    data_files=[
        ('sample_data/cdx', ['sample_data/cdx/iana-a.cdx',
                             'sample_data/cdx/iana-b.cdx']),
        ('sample_data/numbers', ['sample_data/numbers/evens.txt',
                                 'sample_data/numbers/odds.txt']),
    ],
    install_requires=load_requirements('requirements.txt'),
    extras_require={
        'test': load_requirements('test_requirements.txt'),
    },
    python_requires='>=3.7',
    entry_points="""
        [console_scripts]
        multimerge = multimerge.apps.cli:main_wrap_exc
        multimerge-compare = multimerge.apps.cli:compare_wrap_exc
        """,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.7',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: Utilities',
    ])
