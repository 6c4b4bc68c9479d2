import io
from contextlib import closing


# =============================================================================
def no_except_close(closable):
    """Attempts to call the close method of the
    supplied object catching all exceptions.
    Also tries to call release_conn() in case a requests raw stream

    :param closable: The object to be closed
    :rtype: None
    """
    try:
        closable.close()
    except Exception:
        pass

    try:
        closable.release_conn()
    except Exception:
        pass


# =============================================================================
def LineIter(stream, encoding='utf-8', close_stream=True):
    """Yield decoded lines from a binary stream, without line endings.
    Unless close_stream is False, the stream is closed once exhausted
    or when the generator is closed.

    >>> list(LineIter(io.BytesIO(b'a 1\\nb 2\\r\\nc 3')))
    ['a 1', 'b 2', 'c 3']
    """
    raw = StreamClosingReader(stream, close_stream=close_stream)
    reader = io.TextIOWrapper(io.BufferedReader(raw),
                              encoding=encoding,
                              newline='')

    with closing(reader):
        for line in reader:
            yield line.rstrip('\r\n')


# =============================================================================
class StreamClosingReader(io.RawIOBase):
    """Raw reader over any object with read(), closing it on close()"""

    def __init__(self, stream, close_stream=True):
        super(StreamClosingReader, self).__init__()
        self.stream = stream
        self.close_stream = close_stream

    def readable(self):
        return True

    def readinto(self, buff):
        data = self.stream.read(len(buff))
        size = len(data)
        buff[:size] = data
        return size

    def close(self):
        if self.close_stream:
            no_except_close(self.stream)
        super(StreamClosingReader, self).close()
