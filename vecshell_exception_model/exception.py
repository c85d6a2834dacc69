class VecshellException(Exception):
    """
    Base exception for every error raised by the vecshell packages.

    Attributes:
        message -- explanation of the error
    """

    def __init__(self, message):
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        return self.message


class UnrecognizedCommandException(VecshellException):
    """
    Exception raised when an input line matches no command pattern.

    Attributes:
        tokens -- the tokenized input line
        message -- explanation of the error
    """

    def __init__(self, message, tokens=None):
        self.tokens = tokens
        super().__init__(message)

    def __str__(self):
        if self.tokens:
            return f"{self.message} (tokens={' '.join(self.tokens)})"
        return self.message


class UnrecognizedEmbeddingFunctionException(VecshellException):
    """
    Exception raised when the trailing tokens of ``collection new`` do not
    describe a supported embedding function.
    """

    def __init__(self, message, tokens=None):
        self.tokens = tokens
        super().__init__(message)

    def __str__(self):
        if self.tokens:
            return f"{self.message} (tokens={' '.join(self.tokens)})"
        return self.message


class RemoteServiceException(VecshellException):
    """
    Base exception for failures reported by, or on the way to, the remote
    vector-storage service.

    Attributes:
        status_code -- HTTP status code of the failed response, if any
        url -- request URL, if known
        message -- explanation of the error
    """

    def __init__(self, message, status_code=None, url=None):
        self.status_code = status_code
        self.url = url
        super().__init__(message)

    def __str__(self):
        if self.status_code is not None and self.url is not None:
            return f"{self.message} (status={self.status_code}, url={self.url})"
        if self.url is not None:
            return f"{self.message} (url={self.url})"
        return self.message


class ResourceNotFoundException(RemoteServiceException):
    """Exception raised when a tenant, database or collection does not exist."""


class ResourceConflictException(RemoteServiceException):
    """Exception raised when creating a resource that already exists."""


class TransportException(RemoteServiceException):
    """
    Exception raised when the service cannot be reached or answers with an
    unexpected error status.
    """


class SerializationException(RemoteServiceException):
    """
    Exception raised when a response body cannot be decoded into the
    expected model.

    Attributes:
        cause -- the underlying decoding or validation error
    """

    def __init__(self, message, status_code=None, url=None, cause=None):
        self.cause = cause
        super().__init__(message, status_code, url)

    def __str__(self):
        base = super().__str__()
        if self.cause is not None:
            return f"{base}: {self.cause}"
        return base


class ConfigurationException(VecshellException):
    """
    Exception raised when the shell settings are malformed.

    Attributes:
        path -- the configuration file the bad setting came from, if any
        message -- explanation of the error
    """

    def __init__(self, message, path=None):
        self.path = path
        super().__init__(message)

    def __str__(self):
        if self.path is not None:
            return f"{self.message} (path={self.path})"
        return self.message
