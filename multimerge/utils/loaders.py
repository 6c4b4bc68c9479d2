"""
This module provides loaders for the sorted sources to be merged,
from the local file system, python packages and over http,
and the yaml config loading used by the command line tools
"""

import os
import re
import sys
import gzip
import logging
import pkgutil

from io import BytesIO

import requests
import yaml

from multimerge.utils.io import no_except_close, LineIter
from multimerge.utils.exceptions import ConfigException, SourceLoadException


logger = logging.getLogger(__name__)


# ============================================================================
def init_yaml_env_vars():
    """Initializes the yaml parser to be able to set
    the value of fields from environment variables

    :rtype: None
    """
    env_rx = re.compile(r'\$\{[^}]+\}')

    yaml.add_implicit_resolver('!envvar', env_rx)

    def envvar_constructor(loader, node):
        value = loader.construct_scalar(node)
        value = os.path.expandvars(value)
        return value

    yaml.add_constructor('!envvar', envvar_constructor)


# =================================================================
def from_file_url(url):
    """ Convert from file:// url to file path
    """
    if url.startswith('file://'):
        url = url[len('file://'):].replace('/', os.path.sep)

    return url


# =================================================================
def load(filename):
    return BlockLoader().load(filename)


# =============================================================================
def load_yaml_config(config_file):
    config = None
    configdata = None
    try:
        configdata = load(config_file)
        config = yaml.load(configdata, Loader=yaml.Loader)
    except (IOError, ImportError) as e:
        raise ConfigException('Unable to load config {0}: {1}'.format(config_file, e))
    except yaml.YAMLError as ye:
        raise ConfigException('Invalid config {0}: {1}'.format(config_file, ye))
    finally:
        no_except_close(configdata)

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ConfigException('Config {0} must be a mapping'.format(config_file))

    return config


# =============================================================================
def load_overlay_config(main_env_var, overlay=None, config_file=None):
    """Load the yaml config named by config_file, or else by main_env_var,
    then apply the non-None values of the overlay dict on top of it
    """
    configfile = config_file or os.environ.get(main_env_var)
    config = None

    if configfile:
        configfile = os.path.expandvars(configfile)

        config = load_yaml_config(configfile)

    config = config or {}

    if overlay:
        config.update((name, value) for name, value in overlay.items()
                      if value is not None)

    return config


# =================================================================
class BaseLoader(object):
    def __init__(self, **kwargs):
        pass

    def load(self, url):
        raise NotImplementedError()


# =================================================================
class BlockLoader(BaseLoader):
    """
    a loader which can stream the content of a source
    given a uri.
    Currently supports: http/https, file/local file system, pkg
    """

    loaders = {}

    def __init__(self, **kwargs):
        super(BlockLoader, self).__init__()
        self.cached = {}
        self.kwargs = kwargs

    def load(self, url):
        loader, url = self._get_loader_for_url(url)
        return loader.load(url)

    def _get_loader_for_url(self, url):
        """
        Determine loading method based on uri
        """
        parts = url.split('://', 1)
        if len(parts) < 2:
            type_ = 'file'
        else:
            type_ = parts[0]

        loader = self.cached.get(type_)
        if loader:
            return loader, url

        loader_cls = self.loaders.get(type_)

        if not loader_cls:
            raise IOError('No Loader for type: ' + type_)

        loader = loader_cls(**self.kwargs)

        self.cached[type_] = loader
        return loader, url

    @staticmethod
    def init_default_loaders():
        BlockLoader.loaders['http'] = HttpLoader
        BlockLoader.loaders['https'] = HttpLoader
        BlockLoader.loaders['file'] = LocalFileLoader
        BlockLoader.loaders['pkg'] = PackageLoader


# =================================================================
class PackageLoader(BaseLoader):
    def load(self, url):
        if url.startswith('pkg://'):
            url = url[len('pkg://'):]

        # then, try as package.path/file
        pkg_split = url.split('/', 1)
        if len(pkg_split) == 1:
            raise IOError('Not a package resource: ' + url)

        data = pkgutil.get_data(pkg_split[0], pkg_split[1])

        buff = BytesIO(data)
        buff.name = url
        return buff


# =================================================================
class LocalFileLoader(PackageLoader):
    def load(self, url):
        """
        Load a file-like reader from the local file system
        """

        # if starting with . or /, can only be a file path..
        file_only = url.startswith(('/', '.'))

        # convert to filename
        filename = from_file_url(url)
        if filename != url:
            file_only = True
            url = filename

        try:
            # first, try as file
            return open(url, 'rb')

        except IOError:
            if file_only:
                raise

            return super(LocalFileLoader, self).load(url)


# =================================================================
class HttpLoader(BaseLoader):
    def __init__(self, **kwargs):
        super(HttpLoader, self).__init__()
        self.session = None
        self.headers = kwargs.get('headers') or {}

    def load(self, url):
        """
        Load a file-like reader over http, streaming the response
        """
        if not self.session:
            self.session = requests.Session()

        r = self.session.get(url, headers=self.headers, stream=True)
        r.raise_for_status()
        r.raw.decode_content = True
        return r.raw


BlockLoader.init_default_loaders()


# =================================================================
def iter_source_paths(paths):
    """Expand directories into the files below them, in sorted order.
    Urls, '-' and plain files are passed through unchanged.
    """
    for path in paths:
        if path != '-' and '://' not in path and os.path.isdir(path):
            for root, dirs, files in os.walk(path):
                dirs.sort()
                for name in sorted(files):
                    yield os.path.join(root, name)
        else:
            yield path


# =================================================================
class SourceOpener(object):
    """Opens each merge source as a lazy iterator of text lines.

    Opening happens on the first pull from the returned iterator, so a merge
    over many sources does no I/O until it is consumed.
    """

    def __init__(self, encoding='utf-8', stdin=None, headers=None):
        """
        :param str encoding: text encoding of every source
        :param stdin: binary stream read for the "-" source (default sys.stdin)
        :param dict headers: extra request headers for http(s) sources
        """
        self.encoding = encoding
        self.stdin = stdin
        self.loader = BlockLoader(headers=headers)

    def open_stream(self, url):
        if url == '-':
            stream = self.stdin or sys.stdin.buffer
        else:
            try:
                stream = self.loader.load(url)
            except (IOError, ImportError, requests.RequestException) as e:
                raise SourceLoadException('Unable to open {0}: {1}'.format(url, e),
                                          source=url)

        logger.debug('Opened source ' + url)
        return stream

    def __call__(self, url):
        close_stream = (url != '-')
        stream = self.open_stream(url)
        try:
            if url.endswith('.gz'):
                reader = gzip.GzipFile(fileobj=stream, mode='rb')
            else:
                reader = stream

            yield from LineIter(reader, encoding=self.encoding,
                                close_stream=close_stream)
        finally:
            if close_stream:
                no_except_close(stream)


init_yaml_env_vars()
