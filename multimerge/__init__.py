from multimerge.version import __version__
from multimerge.utils.merge import merge, MergeIterator

DEFAULT_CONFIG_ENV = 'MULTIMERGE_CONFIG'


def get_test_dir():
    import os
    return os.path.join(os.path.dirname(os.path.realpath(__file__)),
                                        '..',
                                        'sample_data') + os.path.sep
