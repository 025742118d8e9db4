""" Custom exceptions for ssh-blog. """


class BlogError(Exception):

    """ Base class of all ssh-blog errors. """

    pass


class Disconnected(BlogError):

    """ Thrown when console input has reached end of file. """

    pass


class SignalUnavailable(BlogError):

    """ A session signal source produced nothing. """

    pass


class KeyMismatch(BlogError):

    """ Presented public key does not match the stored key. """

    pass


class AccountNotFound(BlogError):

    """ No account matches the given username or public key. """

    def __init__(self, message, username=None):
        super(AccountNotFound, self).__init__(message)
        self.username = username


class RegistrationError(BlogError):

    """ A new account could not be registered. """

    pass


class ValidationError(RegistrationError):

    """ Registration input fails a format or length rule. """

    def __init__(self, field, rule):
        super(ValidationError, self).__init__(rule)
        self.field = field
        self.rule = rule


class StorageError(BlogError):

    """ The database could not complete an operation. """

    pass


class DuplicateAccount(StorageError, RegistrationError):

    """ Account creation violates a uniqueness constraint. """

    def __init__(self, field, value):
        super(DuplicateAccount, self).__init__(
            'An account with this {0} already exists: {1!r}'
            .format(field, value))
        self.field = field
        self.value = value


class AuthenticationExhausted(BlogError):

    """ Every automated and interactive avenue of authentication failed. """

    pass
