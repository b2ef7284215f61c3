import logging

from perf_review.store import ReviewStores


class BaseService:
    """
    Base for use-case services. Holds the record stores and a per-class logger.
    """

    def __init__(self, stores: ReviewStores):
        self.stores = stores
        self._logger = logging.getLogger(self.__class__.__module__)

    def log_warning(self, message: str, **extra):
        self._logger.warning(message, extra=extra or None)
