import io
import struct

import numpy
import pytest

from gdfstruct.enum import GdfType, GdfFlag
from gdfstruct.groups import PhysicalConstants
from gdfstruct.header import GDF_MAGIC


DTYPES = {
    GdfType.INT32:  'i4',
    GdfType.DOUBLE: 'f8',
    GdfType.UINT8:  'u1',
    GdfType.INT8:   'i1',
    GdfType.UINT16: 'u2',
    GdfType.INT16:  'i2',
    GdfType.UINT32: 'u4',
    GdfType.UINT64: 'u8',
    GdfType.INT64:  'i8',
    GdfType.FLOAT:  'f4',
}


class GdfWriter(object):
    '''Builds GDF byte streams for the tests, in host byte order.'''

    def __init__(self, magic=GDF_MAGIC, creator='GPT', destination='', version=(1, 0),
                 creator_version=(3, 1), creation_time=0, header=True):
        self.data = io.BytesIO()
        if header:
            self.data.write(struct.pack(
                '=II16s16sBBBB2s',
                magic,
                creation_time,
                creator.encode('ascii'),
                destination.encode('ascii'),
                version[0], version[1],
                creator_version[0], creator_version[1],
                b'\x00\x00',
            ))

    def block(self, name, gdf_type=GdfType.NULL, values=None, flags=GdfFlag.NONE, count=None):
        if values is None:
            payload = b''
        elif gdf_type == GdfType.ASCII:
            payload = values.encode('ascii') if isinstance(values, str) else values
        else:
            payload = numpy.asarray(values, dtype=DTYPES[gdf_type]).tobytes()

        if count is None:
            count = len(payload) // (1 if gdf_type == GdfType.ASCII else numpy.dtype(DTYPES.get(gdf_type, 'u1')).itemsize)

        self.data.write(struct.pack('=8sII', name.encode('ascii'), gdf_type.value | flags.value, count))
        self.data.write(payload)

        return self

    def array(self, name, values, gdf_type=GdfType.DOUBLE, flags=GdfFlag.NONE):
        return self.block(name, gdf_type, values, flags=flags | GdfFlag.ARRAY)

    def scalar(self, name, value, gdf_type=GdfType.DOUBLE, flags=GdfFlag.NONE):
        return self.block(name, gdf_type, [value], flags=flags | GdfFlag.SINGLE_VALUE)

    def start_group(self, name, value, gdf_type=GdfType.DOUBLE):
        return self.scalar(name, value, gdf_type=gdf_type, flags=GdfFlag.START_GROUP)

    def end_group(self):
        return self.block('', GdfType.NULL, flags=GdfFlag.END_GROUP, count=0)

    def end_of_file(self):
        return self.block('', GdfType.NULL, flags=GdfFlag.END_OF_FILE, count=0)

    def raw(self, data):
        self.data.write(data)
        return self

    def getvalue(self):
        return self.data.getvalue()


@pytest.fixture
def gdf():
    '''Factory of GdfWriter'''
    return GdfWriter


@pytest.fixture
def constants():
    return PhysicalConstants(speed_of_light=299792458.0, elementary_charge=1.602176634e-19)


@pytest.fixture
def trajectory_stream(gdf):
    '''The minimal stream with a single particle trajectory.'''
    return (
        gdf(creator='GPT', version=(1, 0))
        .start_group('ID', 1.0)
        .array('x', [1.0, 2.0])
        .array('z', [3.0, 4.0])
        .array('Bx', [0.1, 0.2])
        .array('Bz', [0.9, 0.8])
        .end_group()
        .end_of_file()
        .getvalue()
    )
