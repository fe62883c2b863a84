'''
# GDF file preamble

Every file produced by GPT starts with a fixed 46 bytes header

  .-------------------------------.
  | magic (94325877)        u32   |
  | creation time           u32   |
  | creator                 16 B  |
  | destination             16 B  |
  | format major/minor      2 u8  |
  | creator major/minor     2 u8  |
  | reserved                2 B   |
  '-------------------------------'

the strings are null terminated inside their width.
'''
import logging
from datetime import datetime, timezone

from .core import Chunk
from . import fields
from .enum import FieldRetention
from .exceptions import ChunkUnpackException, FormatError
from .meta import Endianess
from .reporting import Reporter
from .streams import Stream


logger = logging.getLogger(__name__)

GDF_MAGIC = 94325877
GDF_NAME_LENGTH = 16


class FileHeader(Chunk):
    magic         = fields.StructField('I', default=GDF_MAGIC, is_magic=True)
    creation_time = fields.StructField('I')
    creator       = fields.CStringField(GDF_NAME_LENGTH)
    destination   = fields.CStringField(GDF_NAME_LENGTH)
    format_major  = fields.StructField('B')
    format_minor  = fields.StructField('B')
    creator_major = fields.StructField('B')
    creator_minor = fields.StructField('B')
    reserved      = fields.StringField(2)

    @property
    def created(self) -> datetime:
        return datetime.fromtimestamp(self.creation_time.value, tz=timezone.utc)

    @property
    def format_version(self):
        return self.format_major.value, self.format_minor.value

    @property
    def creator_version(self):
        return self.creator_major.value, self.creator_minor.value

    @property
    def destination_name(self):
        return self.destination.value or 'General'

    @property
    def retention(self) -> FieldRetention:
        return FieldRetention.from_creator(self.creator.value)

    def summary(self):
        return '\n'.join([
            'GDF-version: %d.%02d' % self.format_version,
            'Creator    : %s' % self.creator.value,
            '  version  : %d.%02d' % self.creator_version,
            'At         : %s' % self.created.strftime('%d-%b-%Y %H:%M:%S'),
            'Destination: %s' % self.destination_name,
        ])


def read_header(stream, endianess=Endianess.NATIVE, reporter=None) -> FileHeader:
    '''Read the preamble from the start of the stream.

    If the stream is somewhere else it is rewound first and put back where it
    was afterwards, so that the header can be probed at any moment. Called at
    the start, it leaves the stream at the first block.'''
    if not isinstance(stream, Stream):
        stream = Stream(stream)
    reporter = reporter or Reporter(logger=logger)

    position = stream.tell()
    if position != 0:
        if not stream.seekable():
            raise FormatError('stream not seekable', offset=position)
        reporter.info('File pointer is not at the start of the GDF file: seeking file start...')
        stream.save()
        stream.seek(0)

    try:
        header = FileHeader(stream, endianess=endianess)
    except ChunkUnpackException as e:
        raise FormatError('truncated header', offset=stream.tell(), chain=e.chain) from e
    finally:
        if position != 0:
            stream.restore()

    reporter.info(header.summary())

    if not header.is_valid():
        reporter.warning('File ID is not GPT: should be %d, is %d.' % (GDF_MAGIC, header.magic.value), offset=0)

    return header
