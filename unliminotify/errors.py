"""Errors raised by the pipeline stages. Every one of them ends the run."""


class UnliminotifyError(Exception):
    """Base class for fatal run errors"""


class ConfigError(UnliminotifyError):
    """Configuration is missing or invalid"""


class NetworkFailure(UnliminotifyError):
    """The listings feed could not be fetched"""


class ParseFailure(UnliminotifyError):
    """The listings feed or a show time could not be parsed"""


class VenueNotFound(UnliminotifyError):
    """The requested cinema is not in the listings"""

    def __init__(self, cinema_id: int):
        super().__init__(f"Unable to find cinema {cinema_id}")
        self.cinema_id = cinema_id


class TransportFailure(UnliminotifyError):
    """An SMS was rejected or could not be delivered to the provider"""


class StorageFailure(UnliminotifyError):
    """The notifications file could not be read or written"""
