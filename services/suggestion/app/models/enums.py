import enum


class UserType(str, enum.Enum):
    PEOPLE = "people"
    PAGE = "page"
