"""Errors raised by the data layer."""


class RangeNotSatisfiableDBError(Exception):
    """The requested page lies beyond the available rows."""

    code = "RANGE_NOT_SATISFIABLE_ERROR_DB"

    def __init__(self, offset: int, count: int):
        self.offset = offset
        self.count = count
        super().__init__(f"Offset {offset} is beyond the {count} available rows")
