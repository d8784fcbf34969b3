import enum


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"
    NONE = "NONE"


class Device(str, enum.Enum):
    WHITE_PC = "WHITE_PC"
    BLACK_PC = "BLACK_PC"
    LAPTOP = "LAPTOP"
    MAC1 = "MAC1"
    MAC2 = "MAC2"
