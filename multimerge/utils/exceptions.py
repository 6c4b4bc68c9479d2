# =================================================================
class MergeException(Exception):
    """Base class for exceptions raised by the multimerge front end.

    The merge engine itself never raises these: errors from sources,
    key functions and comparisons pass through it unchanged.
    """

    def __init__(self, msg=None, source=None):
        """Initialize a new MergeException

        :param str|None msg: The error message
        :param str|None source: The source path or url that caused the error
        :rtype: None
        """
        super(MergeException, self).__init__(msg)
        self.msg = msg
        self.source = source

    @property
    def status_code(self):
        """Returns the exit status to be used when this error ends a command

        :return: The exit status (2)
        :rtype: int
        """
        return 2

    def __repr__(self):
        return "{0}('{1}',)".format(self.__class__.__name__, self.msg)


# =================================================================
class ConfigException(MergeException):
    """An Exception used to indicate an invalid config file or key spec"""


# =================================================================
class SourceLoadException(MergeException):
    """An Exception used to indicate that a source could not be opened"""

    @property
    def status_code(self):
        """Returns the exit status to be used when this error ends a command

        :return: The exit status (3)
        :rtype: int
        """
        return 3
