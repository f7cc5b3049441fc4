class RiddleAppError(Exception):
    """Handler sınırında {"error": mesaj} olarak dönen hataların tabanı."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RiddleAppError):
    pass


class InvalidRequestError(RiddleAppError):
    pass


class AlreadyAnsweredError(RiddleAppError):
    pass


class EmailTakenError(RiddleAppError):
    pass
