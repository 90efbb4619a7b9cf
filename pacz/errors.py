class PaczError(Exception):
    """Base class for fatal errors; the message is shown to the user as-is."""


class UsageError(PaczError):
    pass


class WatchError(PaczError):
    pass


class SpawnError(PaczError):
    pass
