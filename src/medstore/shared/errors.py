"""Exceptions raised by the domain that have no Protean counterpart."""


class AuthorizationError(Exception):
    """The caller is authenticated but not allowed to perform the operation.

    Carries a ``messages`` mapping shaped like ``ValidationError.messages`` so
    the API layer renders both the same way.
    """

    def __init__(self, messages: dict[str, list[str]]):
        super().__init__(messages)
        self.messages = messages
