import logging

from .enum import Severity
from .exceptions import RecoverableWarning


logger = logging.getLogger(__name__)


class Reporter(object):
    '''One-way sink for the events raised while decoding.

    Every event goes to the logging module and, when given, to the
    collaborator "log" that is called as log(severity, text). Recoverable
    warnings are also kept so that the caller can inspect them.'''

    def __init__(self, log=None, logger=logger):
        self.log = log
        self.logger = logger
        self.warnings = []

    def warning(self, text, offset=None):
        warning = RecoverableWarning(text, offset=offset)
        self.warnings.append(warning)

        self.logger.warning(text)
        if self.log is not None:
            self.log(Severity.RECOVERABLE, text)

        return warning

    def info(self, text):
        self.logger.info(text)
        if self.log is not None:
            self.log(Severity.INFORMATIONAL, text)
