"""Abstract base class for row-oriented table backends."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

Row = list[str]


class TableStore(ABC):
    """A single two-dimensional table whose first row is a header.

    Positions are 1-based storage positions: the header is position 1 and
    data rows start at position 2. Implementations raise ``StoreIOError`` on
    any backend failure.
    """

    def __init__(self, header: Sequence[str]) -> None:
        if not header:
            raise ValueError("header must have at least one column")
        self.header: Row = list(header)

    @property
    def width(self) -> int:
        """Number of columns in the table."""
        return len(self.header)

    @abstractmethod
    def ensure_header(self) -> bool:
        """Write the header row if the table has none.

        Returns:
            True if the header was written, False if one was already present.
        """
        pass

    @abstractmethod
    def append_row(self, row: Sequence[str]) -> None:
        """Append one row after the last row of the table."""
        pass

    @abstractmethod
    def read_all(self) -> list[Row]:
        """Return every row, header included, in storage order.

        An empty table yields an empty list.
        """
        pass

    @abstractmethod
    def update_row(self, position: int, row: Sequence[str]) -> None:
        """Overwrite the row at the given 1-based storage position."""
        pass
