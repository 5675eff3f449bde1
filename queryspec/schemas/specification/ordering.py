import enum


class OrderDirection(str, enum.Enum):
    """
    Enumeration for specifying the direction of ordering in queries.
    """

    asc = "asc"  # Ascending order.
    desc = "desc"  # Descending order.

    @property
    def is_ascending(self) -> bool:
        return self is OrderDirection.asc
