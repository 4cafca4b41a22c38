__all__ = ("RevalidatorError", "InvalidArgumentError")


class RevalidatorError(Exception): ...


class InvalidArgumentError(RevalidatorError, ValueError): ...
