"""Game errors. Each carries a stable code that is sent back to the acting client."""


class GameError(Exception):
    code = "GAME_ERROR"

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg


class NotFound(GameError):
    code = "NOT_FOUND"


class AlreadyExists(GameError):
    code = "ALREADY_EXISTS"


class InvalidInput(GameError):
    code = "INVALID_INPUT"


class RoomFull(GameError):
    code = "ROOM_FULL"


class RoomNotFull(GameError):
    code = "ROOM_NOT_FULL"


class NotHost(GameError):
    code = "NOT_HOST"


class WrongStatus(GameError):
    code = "WRONG_STATUS"


class NotYourTurn(GameError):
    code = "NOT_YOUR_TURN"


class InvalidRequest(GameError):
    code = "INVALID_REQUEST"


class TeamsUnbalanced(GameError):
    code = "TEAMS_UNBALANCED"


class CannotClaimTurn(GameError):
    code = "CANNOT_CLAIM_TURN"
