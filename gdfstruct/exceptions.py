class GdfException(Exception):
    '''Base class to extend in order to throw exception in gdfstruct.

    It takes a single argument that represents the chain of the layer that
    caused the exception.
    '''

    def __init__(self, chain=None):
        self.chain = chain if chain is not None else []
        super().__init__()


class UnpackException(GdfException):
    pass


class ChunkUnpackException(GdfException):
    pass


class FormatError(GdfException):
    '''The stream cannot be decoded any further: nothing decoded so far is returned.

    The byte offset where the problem was detected is kept for diagnostic.'''

    def __init__(self, reason, offset=None, chain=None):
        self.reason = reason
        self.offset = offset
        super().__init__(chain=chain)

    def __str__(self):
        msg = self.reason
        if self.offset is not None:
            msg += ' at offset 0x%08x (%d)' % (self.offset, self.offset)
        if self.chain:
            msg += ' [%s]' % '.'.join(reversed(self.chain))

        return msg


class DecodeCancelled(FormatError):
    '''The caller asked to stop at a block boundary.'''

    def __init__(self, offset=None):
        super().__init__('decode cancelled', offset=offset)


class RecoverableWarning(UserWarning):
    '''Something unexpected in the stream that doesn't prevent decoding:
    these are collected and reported, never raised by the decoder.'''

    def __init__(self, text, offset=None):
        self.text = text
        self.offset = offset
        super().__init__(text)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.text!r}, offset={self.offset})>'
