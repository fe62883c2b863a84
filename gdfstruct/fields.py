"""
A Field is "fundamental" datatype from the format point of view, something directly
unpackable from a stream without need of knowing what surrounds it.
"""
import logging
import struct

import numpy

from .meta import FieldBase, Endianess
from .exceptions import UnpackException


READ_CHUNK_SIZE = 1 << 20


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 endianess=None, is_magic=False):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self._endianess = endianess
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    @property
    def endianess(self) -> Endianess:
        '''Unless explicitly given, the byte order is the one of the father.'''
        if self._endianess is not None:
            return self._endianess
        if self.father is not None:
            return self.father.endianess

        return Endianess.NATIVE

    @endianess.setter
    def endianess(self, value: Endianess):
        self._endianess = value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def is_valid(self):
        '''A magic field is valid only when it contains its default value.'''
        return not self.is_magic or self.value == self.default

    def read_exactly(self, stream, size):
        '''Read in pieces of at most READ_CHUNK_SIZE bytes, the size could come
        from a corrupted count and be much bigger than the data available.'''
        pieces = []
        missing = size
        while missing > 0:
            piece = stream.read(min(missing, READ_CHUNK_SIZE))
            if not piece:
                break
            pieces.append(piece)
            missing -= len(piece)

        raw = b''.join(pieces)
        if len(raw) != size:
            self.logger.debug('short read for %s: wanted %d bytes, got %d' % (self.name, size, len(raw)))
            raise UnpackException(chain=[])

        return raw

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    integers from bytes.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value) if isinstance(self.value, int) else self.value)

    def get_format(self):
        return '%s%s' % (self.endianess.prefix, self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _unpack(self, raw):
        try:
            value = struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            self.logger.error(e)
            raise UnpackException(chain=[])

        if self.is_magic and value != self.default:
            self.logger.debug('the magic doesn\'t correspond: expected %s, found %s' % (self.default, value))

        return value

    def unpack(self, stream):
        self.value = self._unpack(self.read_exactly(stream, self.size))


class StringField(Field):
    """Represent a contiguous chunk of bytes."""

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if not self.default else self.default

    def _get_size(self):
        return self.length

    def unpack(self, stream):
        self.value = self.read_exactly(stream, self.size)


class CStringField(StringField):
    """Fixed width ASCII string, terminated by the first null byte.

    When no terminator is found the whole width is used."""

    def value_from_default(self):
        return self.default or ''

    @staticmethod
    def decode(raw: bytes) -> str:
        return raw.split(b'\x00', 1)[0].decode('ascii', errors='replace')

    def unpack(self, stream):
        self.raw = self.read_exactly(stream, self.size)
        self.value = self.decode(self.raw)


class ArrayField(Field):
    '''Unpack n contiguous elements of the same numeric type into a numpy array.

    If "scalar" is True the single element is returned as a numpy scalar.'''

    def __init__(self, dtype, n=0, scalar=False, **kw):
        self.dtype = dtype
        self.n = n
        self.scalar = scalar
        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.get_dtype()}, n={self.n})>'

    def __len__(self):
        return self.n

    def get_dtype(self) -> numpy.dtype:
        order = self.endianess.prefix
        if self.endianess == Endianess.NETWORK:
            order = '>'

        return numpy.dtype(self.dtype).newbyteorder(order)

    def _get_size(self):
        return self.n * self.get_dtype().itemsize

    def unpack(self, stream):
        raw = self.read_exactly(stream, self.size)
        # native byte order so that downstream arithmetic doesn't care
        array = numpy.frombuffer(raw, dtype=self.get_dtype()).astype(numpy.dtype(self.dtype))

        self.value = array[0] if self.scalar and self.n == 1 else array
