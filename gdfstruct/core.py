"""
Core module for the abstraction of a fixed layout record

"""
import logging
from typing import Tuple, List

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import (
    ChunkUnpackException,
    UnpackException,
)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: a Chunk is a
    sequence of fields declared as class attributes, unpacked in declaration order.

        class Example(Chunk):
            magic = fields.StructField('I', default=0xcafe, is_magic=True)
            label = fields.CStringField(8)

    A Chunk can contain sub-chunks.
    """

    def __init__(self, source=None, **kwargs):
        super().__init__(**kwargs)

        if source is not None:
            stream = source if isinstance(source, Stream) else Stream(source)
            self.logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, stream))
            self.unpack(stream)

    def init(self):
        for _, field in self.get_fields():
            field.init()

    @property
    def value(self):
        return self

    @value.setter
    def value(self, _):
        pass

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def _get_size(self):
        '''the size is derived from the subchunks'''
        return sum(field.size for _, field in self.get_fields())

    def is_valid(self):
        return all(field.is_valid() for _, field in self.get_fields())

    def unpack(self, stream):
        '''Read the fields one after the other starting from the actual
        position of the stream.

        A short read in any of the fields is reported with the chain of
        field names that led to it.'''
        self.offset = stream.tell()
        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s' % (self.__class__.__name__, field_name))

            offset = stream.tell()

            try:
                field.unpack(stream)
            except (UnpackException, ChunkUnpackException) as e:
                chain = e.chain if isinstance(e, ChunkUnpackException) else []
                chain.append(field_name)
                raise ChunkUnpackException(chain=chain)
            field.offset = offset

        if not self.is_valid():
            self.logger.debug(f'magic for chunk \'{self.__class__.__name__}\' failed')
