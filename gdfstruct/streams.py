import io
import logging
import os
from contextlib import contextmanager


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around path/bytes/file objects to
    uniform their properties: the decoder only needs read(), tell() and seek()
    plus a couple of helpers to know how long the underlying data is.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj
        self.owned = False  # close only what we opened
        self.history = []

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self._type.__name__)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        if self.owned:
            self.obj.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.obj = open(self.obj, 'rb')
        self.owned = True

    def init_PosixPath(self):
        self.obj = os.fspath(self.obj)
        self.init_str()

    init_WindowsPath = init_PosixPath

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)
        self.owned = True

    init_bytearray = init_bytes

    def init_file(self):
        '''Anything else must already behave like a binary file object'''
        if not hasattr(self.obj, 'read'):
            raise ValueError('\'%s\' is the wrong kind of object to use as a stream' % self._type.__name__)

    def seekable(self):
        try:
            return self.obj.seekable()
        except AttributeError:
            return hasattr(self.obj, 'seek')

    def seek(self, offset, whence=io.SEEK_SET):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        return self.obj.seek(offset, whence)

    def read(self, size):
        return self.obj.read(size)

    def length(self):
        '''Total size in bytes of the underlying data, None if it cannot be known.'''
        if not self.seekable():
            return None

        with self.preserved():
            return self.obj.seek(0, io.SEEK_END)

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)

    @contextmanager
    def preserved(self):
        '''Whatever happens inside, the cursor comes back where it was.'''
        self.save()
        try:
            yield self
        finally:
            self.restore()
