"""
Exception hierarchy for MOLDPLAN
"""


class MoldplanError(Exception):
    """Base class for all MOLDPLAN errors"""


class SchedulingError(MoldplanError):
    """Raised when a schedule cannot be computed"""


class SchedulingConfigError(SchedulingError):
    """Raised when settings make scheduling impossible (e.g. an empty work day)"""


class RecordNotFoundError(MoldplanError):
    """Raised by a repository when a requested record is missing"""
