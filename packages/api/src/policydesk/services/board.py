# This project was developed with assistance from AI tools.
"""Post-sale board moves as reversible commands.

A board is a mapping of column name to the ordered card ids in that
column. ``MoveCommand.apply`` remembers where the card came from so
``revert`` can put back exactly that card, without copying the board.
"""

import uuid
from dataclasses import dataclass, field

from db.enums import BoardColumn, TaskStatus

Board = dict[str, list[uuid.UUID]]


class CardNotOnBoardError(LookupError):
    """Raised when a move references a card that is not in its source column."""

    pass


def status_for_column(column: BoardColumn | str) -> TaskStatus:
    """Task status implied by dropping a card into ``column``."""
    if BoardColumn(column) == BoardColumn.COMPLETED:
        return TaskStatus.COMPLETED
    return TaskStatus.IN_PROGRESS


@dataclass
class MoveCommand:
    card_id: uuid.UUID
    source_column: str
    dest_column: str
    dest_index: int
    _prior_index: int | None = field(default=None, init=False, repr=False)
    _applied_index: int | None = field(default=None, init=False, repr=False)

    @property
    def applied(self) -> bool:
        return self._prior_index is not None

    def apply(self, board: Board) -> Board:
        """Move the card in place. Indexes past the end append."""
        source = board.get(self.source_column, [])
        try:
            prior = source.index(self.card_id)
        except ValueError as exc:
            raise CardNotOnBoardError(
                f"Card {self.card_id} is not in column '{self.source_column}'"
            ) from exc

        source.pop(prior)
        dest = board.setdefault(self.dest_column, [])
        index = max(0, min(self.dest_index, len(dest)))
        dest.insert(index, self.card_id)
        self._prior_index = prior
        self._applied_index = index
        return board

    def revert(self, board: Board) -> Board:
        """Undo this command's move and nothing else."""
        if not self.applied:
            raise RuntimeError("Cannot revert a move that was not applied")
        board[self.dest_column].pop(self._applied_index)
        board.setdefault(self.source_column, []).insert(self._prior_index, self.card_id)
        self._prior_index = None
        self._applied_index = None
        return board
