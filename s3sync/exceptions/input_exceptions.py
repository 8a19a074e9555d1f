class InputException(Exception):
    """Base for all pasted-input failures"""

    pass


class MissingValueException(InputException):
    def __init__(self, field: str, hint: str):
        self.field: str = field
        self.hint: str = hint
        super().__init__(f"The {field} was not found.")


class InputReadException(InputException):
    pass


class InputInterruptedException(InputException):
    pass
