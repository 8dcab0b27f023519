"""
Persistor exception classes.

Request errors (MissingAction, UnknownAction, MalformedRequest,
ExecutionFailure) end a request with exactly one error reply. A
TranslationWarning never reaches the caller: the value is omitted and the
diagnostic is logged.
"""


class PersistorError(Exception):
    """Base class for all persistor errors.
    """


class MissingAction(PersistorError):
    """Request carries no action.
    """

    def __init__(self, message='Please specify an action!'):
        super().__init__(message)


class UnknownAction(PersistorError):
    """Request action is not one the handler dispatches.
    """

    def __init__(self, action):
        self.action = action
        super().__init__(f"Action '{action}' unknown!")


class MalformedRequest(PersistorError):
    """Statement fields could not be turned into an executable statement.
    """

    def __init__(self, message='Could not create query statement!'):
        super().__init__(message)


class ExecutionFailure(PersistorError):
    """The database rejected or failed to run the statement.
    """


class ConnectionFailure(PersistorError):
    """Error building the cluster or connecting its session.
    """


class NoHandlerFound(PersistorError):
    """No handler is registered at the bus address.
    """

    def __init__(self, address):
        self.address = address
        super().__init__(f'No handlers for address {address}')


class TranslationWarning(UserWarning):
    """A single value could not be represented in the output document.
    """
