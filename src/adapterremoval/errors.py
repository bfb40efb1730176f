"""
Exceptions that abort a run
"""


class AdapterRemovalError(Exception):
    pass


class FormatError(AdapterRemovalError):
    """A malformed input record (bad sequence or quality data, truncated entry)"""


class PairingError(FormatError):
    """The mate 1 and mate 2 inputs contain an unequal number of records"""


class ConfigError(AdapterRemovalError):
    pass
