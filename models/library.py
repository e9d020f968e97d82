from enum import Enum


class LibraryItemStatus(str, Enum):
    OWNED = "owned"
    WISHLIST = "wishlist"
    PREORDERED = "preordered"
    FORMERLY_OWNED = "formerlyOwned"
    PLAYED = "played"


class BoxSizeClass(str, Enum):
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    TALL = "Tall"


class GameCondition(str, Enum):
    NEW = "new"
    LIKE_NEW = "likeNew"
    GOOD = "good"
    FAIR = "fair"
    WORN = "worn"


class Visibility(str, Enum):
    PUBLIC = "public"
    FOLLOWERS = "followers"
    PRIVATE = "private"

