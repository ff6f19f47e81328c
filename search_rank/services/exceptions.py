"""Domain-specific exceptions."""


class SearchError(RuntimeError):
    pass


class SearchConfigurationError(SearchError):
    """The search request could not be built or issued."""


class SearchExecutionError(SearchError):
    """The search request was issued but the provider rejected or failed it."""


class InvalidSearchRequest(SearchError, ValueError):
    """Caller passed arguments outside the supported range."""


class NoResultsError(SearchError):
    pass
