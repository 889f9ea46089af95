from enum import Enum


class Operation(Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"


class DuplicatePolicy(Enum):
    LAST_WINS = "eLastWins"
    REJECT = "eReject"
