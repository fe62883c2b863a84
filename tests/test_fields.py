import io

import numpy
import pytest

from gdfstruct.exceptions import UnpackException
from gdfstruct.fields import StructField, StringField, CStringField, ArrayField
from gdfstruct.meta import Endianess
from gdfstruct.streams import Stream


def test_structfield_unpack():
    field = StructField('I', endianess=Endianess.LITTLE_ENDIAN)

    assert field.size == 4
    assert field.value == 0

    field.unpack(Stream(b'\x01\x02\x03\x04'))

    assert field.value == 0x04030201


def test_structfield_big_endian():
    field = StructField('H', endianess=Endianess.BIG_ENDIAN)

    field.unpack(Stream(b'\xca\xfe'))

    assert field.value == 0xcafe


def test_structfield_short_read():
    field = StructField('I')

    with pytest.raises(UnpackException):
        field.unpack(Stream(b'\x01\x02'))


def test_structfield_magic():
    field = StructField('I', default=0xcafebabe, is_magic=True, endianess=Endianess.LITTLE_ENDIAN)

    assert field.is_valid()

    field.unpack(Stream(b'\xef\xbe\xad\xde'))

    assert field.value == 0xdeadbeef
    assert not field.is_valid()


def test_stringfield():
    field = StringField(0x10)

    assert field.size == 0x10
    assert field.value == b'\x00' * 0x10

    data = bytes(range(0x10))
    field.unpack(Stream(data + b'trailing'))

    assert field.value == data


def test_cstringfield():
    field = CStringField(8)
    field.unpack(Stream(b'ID\x00garbg'))

    assert field.value == 'ID'
    assert field.raw == b'ID\x00garbg'


def test_cstringfield_without_terminator():
    '''the whole width is taken when there is no null byte'''
    field = CStringField(4)
    stream = Stream(b'timeXX')
    field.unpack(stream)

    assert field.value == 'time'
    assert stream.tell() == 4


def test_arrayfield():
    values = numpy.array([1.0, -2.5, 3.25])
    field = ArrayField('f8', n=3)

    assert field.size == 24
    assert len(field) == 3

    field.unpack(Stream(values.tobytes()))

    assert isinstance(field.value, numpy.ndarray)
    numpy.testing.assert_array_equal(field.value, values)
    assert field.value.flags.writeable


def test_arrayfield_scalar():
    field = ArrayField('i4', n=1, scalar=True, endianess=Endianess.LITTLE_ENDIAN)
    field.unpack(Stream(b'\x2a\x00\x00\x00'))

    assert numpy.ndim(field.value) == 0
    assert field.value == 42


def test_arrayfield_big_endian_is_returned_native():
    field = ArrayField('u2', n=2, endianess=Endianess.BIG_ENDIAN)
    field.unpack(Stream(b'\x00\x01\x01\x00'))

    assert field.value.dtype == numpy.dtype('u2')
    assert list(field.value) == [1, 256]


def test_arrayfield_short_read():
    field = ArrayField('f8', n=2)

    with pytest.raises(UnpackException):
        field.unpack(Stream(b'\x00' * 12))


class Trickle(io.RawIOBase):
    '''Hands out at most three bytes per read, like a pipe would.'''

    def __init__(self, data):
        self.data = io.BytesIO(data)

    def readable(self):
        return True

    def read(self, size=-1):
        return self.data.read(min(size, 3))


def test_arrayfield_partial_reads():
    values = numpy.array([1.0, 2.0])
    field = ArrayField('f8', n=2)

    field.unpack(Stream(Trickle(values.tobytes())))

    numpy.testing.assert_array_equal(field.value, values)


def test_arrayfield_huge_count():
    '''the declared count is not trusted when reading'''
    field = ArrayField('f8', n=0xfffffff0)

    with pytest.raises(UnpackException):
        field.unpack(Stream(Trickle(b'\x00' * 16)))
