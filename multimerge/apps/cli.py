from argparse import ArgumentParser

import logging
import os
import shutil
import sys
import tempfile

from multimerge import DEFAULT_CONFIG_ENV
from multimerge.version import __version__
from multimerge.utils.exceptions import MergeException, ConfigException
from multimerge.utils.keys import make_line_key
from multimerge.utils.loaders import load_overlay_config
from multimerge.utils.loaders import iter_source_paths, SourceOpener
from multimerge.utils.merge import merge


logger = logging.getLogger(__name__)


#=============================================================================
def main(args=None):
    """Utility function for merging sorted files, directories and urls"""
    return MergeCli(args=args,
                    desc='Merge sorted line-oriented sources into one sorted output').run()


#=============================================================================
def compare(args=None):
    """Utility function for counting the comparisons made by merge functions"""
    return CompareCli(args=args,
                      desc='Count comparisons of heapq.merge and multimerge.merge').run()


#=============================================================================
def main_wrap_exc(func=main):  # pragma: no cover
    try:
        func()
    except MergeException as e:
        print('Error: ' + str(e), file=sys.stderr)
        sys.exit(e.status_code)
    except Exception as e:
        print('Error: {0}: {1}'.format(type(e).__name__, e), file=sys.stderr)
        sys.exit(1)


def compare_wrap_exc():  # pragma: no cover
    main_wrap_exc(compare)


#=============================================================================
class BaseCli(object):
    """Base CLI class that provides the initial arg parser setup,
    calls load to prepare the command and runs it."""

    def __init__(self, args=None, desc=''):
        """
        :param args: CLI arguments
        :param str desc: The description for the command
        """
        parser = ArgumentParser(description=desc)
        parser.add_argument('-V', '--version', action='version',
                            version='%(prog)s ' + __version__)
        parser.add_argument('--debug', action='store_true',
                            help='Enable debug logging')

        self.desc = desc

        self._extend_parser(parser)

        self.r = parser.parse_args(args)

        logging.basicConfig(format='%(asctime)s: [%(levelname)s]: %(message)s',
                            level=logging.DEBUG if self.r.debug else logging.INFO)

        self.load()

    def _extend_parser(self, parser):  #pragma: no cover
        """Method provided for subclasses to add their cli argument on top of the default cli arguments.

        :param ArgumentParser parser: The argument parser instance passed by BaseCli
        """
        pass

    def load(self):
        """Called once the args are parsed, to prepare the command"""
        pass

    def run(self):  #pragma: no cover
        raise NotImplementedError()


#=============================================================================
class MergeCli(BaseCli):
    """CLI class for merging sorted sources with multimerge.merge"""

    def __init__(self, args=None, desc='', stdin=None, stdout=None):
        self.stdin = stdin
        self.stdout = stdout
        self.config = {}
        self.lines_written = 0
        super(MergeCli, self).__init__(args=args, desc=desc)

    def _extend_parser(self, parser):
        parser.add_argument('sources', nargs='*',
                            help='Sorted files, directories or urls to merge ("-" for stdin)')
        parser.add_argument('-o', '--output',
                            help='Output file (default "-" for stdout)')
        parser.add_argument('-k', '--key',
                            help='Comma separated 1-based fields to compare by (default whole line)')
        parser.add_argument('-t', '--separator',
                            help='Field separator (default whitespace)')
        parser.add_argument('-n', '--numeric', action='store_true', default=None,
                            help='Compare key fields as numbers')
        parser.add_argument('-r', '--reverse', action='store_true', default=None,
                            help='Sources are sorted in descending order')
        parser.add_argument('--encoding',
                            help='Text encoding of sources and output (default utf-8)')
        parser.add_argument('-H', '--header', action='append', default=[],
                            help='Extra "Name: value" request header for http(s) sources')
        parser.add_argument('-c', '--config',
                            help='YAML config file (default ${0})'.format(DEFAULT_CONFIG_ENV))

    def load(self):
        overlay = dict((name, getattr(self.r, name))
                       for name in ('output', 'reverse', 'encoding'))

        config = load_overlay_config(DEFAULT_CONFIG_ENV,
                                     overlay=overlay,
                                     config_file=self.r.config)

        key_config = config.get('key') or {}
        if not isinstance(key_config, dict):
            key_config = {'fields': key_config}

        if self.r.key is not None:
            key_config['fields'] = self.r.key
        if self.r.separator is not None:
            key_config['separator'] = self.r.separator
        if self.r.numeric is not None:
            key_config['numeric'] = self.r.numeric

        config['key'] = key_config
        config['headers'] = self._load_headers(config.get('headers'))

        sources = list(self.r.sources)
        config_sources = config.get('sources') or []
        if isinstance(config_sources, str):
            config_sources = [config_sources]

        config['sources'] = sources + list(config_sources)

        if not config['sources']:
            raise ConfigException('No sources to merge')

        self.config = config

        self.keyfunc = make_line_key(key_config.get('fields'),
                                     key_config.get('separator'),
                                     bool(key_config.get('numeric')))

    def _load_headers(self, headers):
        if not headers:
            headers = {}
        elif not isinstance(headers, dict):
            raise ConfigException('headers must be a mapping of name to value')

        headers = dict((str(name), str(value)) for name, value in headers.items())

        for header in self.r.header:
            name, sep, value = header.partition(':')
            if not sep or not name.strip():
                raise ConfigException('Invalid header "{0}", expected "Name: value"'.format(header))

            headers[name.strip()] = value.strip()

        return headers

    def merged_lines(self):
        opener = SourceOpener(encoding=self.config.get('encoding') or 'utf-8',
                              stdin=self.stdin,
                              headers=self.config.get('headers'))

        paths = list(iter_source_paths(self.config['sources']))
        logger.info('Merging {0} sources'.format(len(paths)))

        return merge(*[opener(path) for path in paths],
                     key=self.keyfunc,
                     reverse=bool(self.config.get('reverse')))

    def run(self):
        output = self.config.get('output') or '-'

        if output == '-':
            out = self.stdout or sys.stdout
            self._write_all(out)
        else:
            self._write_file(output)

        logger.info('Wrote {0} lines to {1}'.format(self.lines_written, output))
        return self

    def _write_file(self, output):
        # an existing output is only replaced once every source merged cleanly
        out = tempfile.NamedTemporaryFile('wt',
                                          encoding=self.config.get('encoding') or 'utf-8',
                                          dir=os.path.dirname(os.path.abspath(output)),
                                          prefix='.multimerge-',
                                          delete=False)
        try:
            with out:
                self._write_all(out)

            shutil.move(out.name, output)
        except BaseException:
            if os.path.exists(out.name):
                os.remove(out.name)
            raise

    def _write_all(self, out):
        for line in self.merged_lines():
            out.write(line + '\n')
            self.lines_written += 1


#=============================================================================
class CompareCli(BaseCli):
    """CLI class for the comparison count benchmark"""

    def _extend_parser(self, parser):
        parser.add_argument('-s', '--sources', type=int, default=16,
                            help='Number of sorted sources (default 16)')
        parser.add_argument('-l', '--length', type=int, default=1000,
                            help='Length of each source (default 1000)')

    def run(self):
        from multimerge.apps.compares import run_benchmark, format_results

        self.results = run_benchmark(n_sources=self.r.sources, size=self.r.length)
        print(format_results(self.results))
        return self


#=============================================================================
if __name__ == "__main__":
    main_wrap_exc()
