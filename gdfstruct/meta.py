import copy
import logging
from enum import Enum


class Endianess(Enum):
    '''Byte order of a field, its value is the struct prefix.'''
    LITTLE_ENDIAN = '<'
    BIG_ENDIAN    = '>'
    NETWORK       = '!'
    NATIVE        = '='

    @property
    def prefix(self):
        return self.value


class FieldDescriptor(object):
    """Read-only access to the fields of a Chunk instance.

    The field declared at class level is a template: the first time it is
    accessed from an instance, a copy bound to that instance is created."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self.field

        try:
            return instance.__dict__[self.field.name]
        except KeyError:
            field = instance.__dict__[self.field.name] = self.field.create(father=instance)
            return field


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if getattr(cls, name, None) is not None:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Field names of a Chunk in unpacking order."""

    def __init__(self, fields=None):
        self.fields = list(fields or [])


class MetaChunk(type):
    logger = logging.getLogger(__name__)

    def __new__(cls, name, bases, attrs):
        '''The fields of the parents come first, then the ones declared in
        the class body, in declaration order.'''
        declared = {key: value for key, value in attrs.items() if hasattr(value, 'contribute_to_chunk')}
        plain = {key: value for key, value in attrs.items() if key not in declared}

        new_cls = super().__new__(cls, name, bases, plain)

        inherited = []
        for parent in bases:
            if isinstance(parent, MetaChunk):
                inherited.extend(_ for _ in parent._meta.fields if _ not in inherited)

        new_cls._meta = Meta(inherited)

        for field_name, field in declared.items():
            cls.logger.debug('field \'%s\' of chunk %s' % (field_name, name))
            new_cls._meta.fields.append(field_name)
            field.contribute_to_chunk(new_cls, field_name)

        return new_cls
