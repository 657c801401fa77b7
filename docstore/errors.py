"""
Errors raised by the document store and the access checks

Each error subclasses the builtin exception closest to its meaning, so callers that only
care about e.g. a missing file can keep catching FileNotFoundError.
"""


class InvalidRequest(ValueError):
    """The document cannot be identified, or the request misses a required value"""


class InvalidContent(InvalidRequest):
    """The document content is not valid (standard) Base64"""


class NotFound(FileNotFoundError):
    pass


class Unauthorized(PermissionError):
    """The ACL service denied access, or the API key is not valid"""


class UpstreamUnavailable(ConnectionError):
    """The ACL service could not be reached before the retry deadline passed"""


class IOFailure(OSError):
    pass
