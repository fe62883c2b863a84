'''
# GDF blocks

After the preamble the file is a flat sequence of self-describing blocks

  .-------------------------------.
  | name                    8 B   |
  | type word               u32   |
  | count                   u32   |
  | payload   count x width       |
  '-------------------------------'

The low byte of the type word selects the primitive type of the elements,
the higher bits are the GdfFlag markers: a block flagged START_GROUP opens a
directory (its own payload is the first field of it), a block flagged
END_GROUP closes it and doesn't carry any payload.
'''
import logging

from .core import Chunk
from . import fields
from .enum import GdfType, GdfFlag, TYPE_MASK, FLAG_MASK
from .exceptions import ChunkUnpackException, FormatError, UnpackException
from .meta import Endianess
from .streams import Stream


logger = logging.getLogger(__name__)

BLOCK_NAME_LENGTH = 8


# mapping between primitive type and the field able to unpack its payload
type2field = {
    GdfType.ASCII:  (fields.CStringField, (), {}),
    GdfType.INT32:  (fields.ArrayField, ('i4',), {}),
    GdfType.DOUBLE: (fields.ArrayField, ('f8',), {}),
    GdfType.UINT8:  (fields.ArrayField, ('u1',), {}),
    GdfType.INT8:   (fields.ArrayField, ('i1',), {}),
    GdfType.UINT16: (fields.ArrayField, ('u2',), {}),
    GdfType.INT16:  (fields.ArrayField, ('i2',), {}),
    GdfType.UINT32: (fields.ArrayField, ('u4',), {}),
    GdfType.UINT64: (fields.ArrayField, ('u8',), {}),
    GdfType.INT64:  (fields.ArrayField, ('i8',), {}),
    GdfType.FLOAT:  (fields.ArrayField, ('f4',), {}),
}


ELEMENT_SIZE = {
    GdfType.ASCII: 1, GdfType.UINT8: 1, GdfType.INT8: 1,
    GdfType.UINT16: 2, GdfType.INT16: 2,
    GdfType.INT32: 4, GdfType.UINT32: 4, GdfType.FLOAT: 4,
    GdfType.DOUBLE: 8, GdfType.UINT64: 8, GdfType.INT64: 8,
}


class BlockHeader(Chunk):
    label = fields.CStringField(BLOCK_NAME_LENGTH)
    type  = fields.StructField('I')
    count = fields.StructField('I')

    # True only for the headers not read from the stream
    synthetic = False

    @classmethod
    def end_of_stream_marker(cls, offset):
        '''Header standing for "nothing more to read".'''
        header = cls()
        header.type.value = GdfFlag.END_OF_FILE.value
        header.offset = offset
        header.synthetic = True

        return header

    @property
    def field_name(self) -> str:
        '''Some writers prefix the names with '@'.'''
        name = self.label.value
        return name[1:] if name.startswith('@') else name

    @property
    def primitive(self) -> GdfType:
        code = self.type.value & TYPE_MASK
        try:
            return GdfType(code)
        except ValueError:
            raise FormatError('unknown type code 0x%02x for block \'%s\'' % (code, self.field_name), offset=self.offset)

    @property
    def flags(self) -> GdfFlag:
        return GdfFlag(self.type.value & FLAG_MASK)

    @property
    def starts_group(self):
        return bool(self.flags & GdfFlag.START_GROUP)

    @property
    def ends_group(self):
        return bool(self.flags & GdfFlag.END_GROUP)

    @property
    def end_of_stream(self):
        return bool(self.flags & GdfFlag.END_OF_FILE)

    @property
    def is_marker(self):
        return self.ends_group or self.end_of_stream

    @property
    def has_payload(self):
        return not self.is_marker and self.count.value > 0 and self.primitive != GdfType.NULL

    @property
    def payload_size(self):
        if not self.has_payload:
            return 0

        return self.count.value * ELEMENT_SIZE[self.primitive]

    def __repr__(self):
        return '<%s(%r, %s, count=%d, flags=%s)>' % (
            self.__class__.__name__,
            self.field_name,
            self.primitive.name if not self.is_marker else '-',
            self.count.value,
            self.flags,
        )


class BlockReader(object):
    '''Read one block at a time: first the header, then (if the caller wants) the payload.'''

    def __init__(self, stream, endianess=Endianess.NATIVE):
        self.stream = stream if isinstance(stream, Stream) else Stream(stream)
        self.endianess = endianess
        self.header_size = BlockHeader().size
        self.length = self.stream.length()
        self.finished = False

    def tell(self):
        return self.stream.tell()

    def read_header(self) -> BlockHeader:
        '''Once the end of the stream has been reported it keeps being reported.'''
        offset = self.stream.tell()
        if self.finished:
            return BlockHeader.end_of_stream_marker(offset)

        raw = self.stream.read(self.header_size)

        if len(raw) == 0:
            logger.debug('end of stream at offset %d' % offset)
            self.finished = True
            return BlockHeader.end_of_stream_marker(offset)

        if len(raw) < self.header_size:
            raise FormatError('truncated block header', offset=offset)

        try:
            header = BlockHeader(raw, endianess=self.endianess)
        except ChunkUnpackException as e:
            raise FormatError('truncated block header', offset=offset, chain=e.chain) from e
        header.offset = offset

        # fail here if the type is garbage, we couldn't know how much to skip
        if not header.is_marker:
            header.primitive

        if header.end_of_stream:
            self.finished = True

        logger.debug('read %r at offset %d' % (header, offset))

        return header

    def get_field(self, header: BlockHeader) -> fields.Field:
        field_class, args, kwargs = type2field[header.primitive]

        if field_class is fields.CStringField:
            return field_class(*args, n=header.count.value, name=header.field_name, endianess=self.endianess, **kwargs)

        flags = header.flags
        scalar = bool(flags & GdfFlag.SINGLE_VALUE) or not (flags & GdfFlag.ARRAY)

        return field_class(*args, n=header.count.value, scalar=scalar,
                           name=header.field_name, endianess=self.endianess, **kwargs)

    def read_payload(self, header: BlockHeader):
        '''Return the decoded payload of the block or None if it doesn't have one.'''
        if not header.has_payload:
            return None

        field = self.get_field(header)
        offset = self.stream.tell()
        logger.debug('reading %d bytes of payload for \'%s\'' % (header.payload_size, header.field_name))

        if self.length is not None and header.payload_size > self.length - offset:
            raise FormatError('truncated payload', offset=offset, chain=[header.field_name])

        try:
            field.unpack(self.stream)
        except (UnpackException, ChunkUnpackException) as e:
            raise FormatError('truncated payload', offset=offset, chain=e.chain + [header.field_name]) from e

        return field.value
