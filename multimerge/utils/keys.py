"""
Key functions for merging delimited text lines

>>> key = make_line_key('2')
>>> key('org,iana)/ 20140126200624 http://www.iana.org/')
'20140126200624'

>>> key = make_line_key('2,1', separator=',')
>>> key('b,3,x\\n')
('3', 'b')

>>> key = make_line_key('2', separator='\\t', numeric=True)
>>> key('a\\t10.5\\n')
10.5

Missing fields compare as empty strings
>>> make_line_key('3')('a b')
''

>>> make_line_key(None) is None
True
"""

from multimerge.utils.exceptions import ConfigException


#=============================================================================
def parse_fields(fields):
    """Parse a 1-based field list such as ``'1,3'`` into 0-based indices

    >>> parse_fields('1,3')
    [0, 2]
    >>> parse_fields([2])
    [1]
    >>> parse_fields('0')  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
    multimerge.utils.exceptions.ConfigException: Invalid key field: '0'
    """
    if isinstance(fields, int):
        fields = [fields]
    elif isinstance(fields, str):
        fields = [f for f in fields.split(',') if f.strip()]

    indices = []
    for field in fields:
        try:
            index = int(field)
        except (TypeError, ValueError):
            index = 0

        if index < 1:
            raise ConfigException('Invalid key field: {0!r}'.format(field))

        indices.append(index - 1)

    if not indices:
        raise ConfigException('No key fields specified')

    return indices


#=============================================================================
def make_line_key(fields=None, separator=None, numeric=False):
    """Return a key function over text lines, or None to compare whole lines

    :param fields: 1-based field list, as a ``'1,3'`` string or a list
    :param str separator: field separator, None to split on whitespace
    :param bool numeric: compare the selected fields as floats
    """
    if not fields:
        if numeric:
            return _numeric

        return None

    indices = parse_fields(fields)
    convert = _numeric if numeric else _strip_newline

    def extract(parts, index):
        if index < len(parts):
            return convert(parts[index])

        return 0.0 if numeric else ''

    if len(indices) == 1:
        index = indices[0]

        def line_key(line):
            return extract(line.split(separator), index)

    else:
        def line_key(line):
            parts = line.split(separator)
            return tuple(extract(parts, index) for index in indices)

    return line_key


def _strip_newline(field):
    return field.rstrip('\r\n')


def _numeric(field):
    return float(field)
