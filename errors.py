class StoreError(Exception):
    """The key-value store could not be reached or rejected a command."""


class AuthError(Exception):
    """A presented token does not grant access to a room.

    The message is the reason, meant for logs only.
    """


class BadRequest(AuthError):
    pass


class Unauthorized(AuthError):
    pass
