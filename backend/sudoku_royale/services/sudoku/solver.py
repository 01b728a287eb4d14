from typing import List, Optional, Sequence

from .board import SIZE, Grid, box_index, copy_board

# Bits 1..9 set: every digit still available.
ALL_VALUES = sum(1 << v for v in range(1, SIZE + 1))


class SudokuSolver:
    """Backtracking solver over a working copy of a board.

    Cells are filled in row-major order and values are tried 1..9 in
    ascending order, so the search is fully deterministic for a given
    board. Complete boards are appended to ``solutions``.

    Row, column and box occupancy are kept as bitmasks so each step only
    looks at three integers; the search tree is the same one a plain
    ``is_placement_legal`` scan would walk.
    """

    def __init__(self, board: Sequence[Sequence[int]]):
        self.board: Grid = copy_board(board)
        self.solutions: List[Grid] = []
        self._limit: Optional[int] = None

    def solve(self, stop_after_second_solution: bool = False, max_solutions: Optional[int] = None) -> bool:
        """Search for completions, recording each one in ``solutions``.

        With ``stop_after_second_solution`` the search aborts as soon as
        two solutions are on record. ``max_solutions`` sets any other
        cap; without either the search enumerates every completion.
        Returns True if at least one solution was recorded. An
        unsolvable board is not an error, it simply records nothing.
        """
        self._limit = 2 if stop_after_second_solution else max_solutions
        state = self._occupancy()
        if state is not None:
            self._search(state[0], 0, *state[1:])
        return bool(self.solutions)

    def _occupancy(self):
        """Empty cells plus row, column and box bitmasks of the givens.

        None when two givens already clash, so no completion exists.
        """
        rows = [0] * SIZE
        cols = [0] * SIZE
        boxes = [0] * SIZE
        empties = []
        for r in range(SIZE):
            for c in range(SIZE):
                v = self.board[r][c]
                b = box_index(r, c)
                if v == 0:
                    empties.append((r, c, b))
                    continue
                bit = 1 << v
                if (rows[r] | cols[c] | boxes[b]) & bit:
                    return None
                rows[r] |= bit
                cols[c] |= bit
                boxes[b] |= bit
        return empties, rows, cols, boxes

    def _search(self, empties, idx, rows, cols, boxes) -> bool:
        # Filling happens in row-major order, so the first empty cell at
        # depth idx is always empties[idx].
        if idx == len(empties):
            self.solutions.append(copy_board(self.board))
            return True
        row, col, box = empties[idx]
        used = rows[row] | cols[col] | boxes[box]
        for value in range(1, SIZE + 1):
            bit = 1 << value
            if used & bit:
                continue
            self.board[row][col] = value
            rows[row] |= bit
            cols[col] |= bit
            boxes[box] |= bit
            found = self._search(empties, idx + 1, rows, cols, boxes)
            self.board[row][col] = 0
            rows[row] &= ~bit
            cols[col] &= ~bit
            boxes[box] &= ~bit
            if found and self._limit is not None and len(self.solutions) >= self._limit:
                return True
        return False

    def count(self, limit: int = 2) -> int:
        """Number of completions, counting no further than ``limit``.

        Whether a board has one, several or no completions does not depend
        on the order cells are tried in, so counting branches on the cell
        with the fewest candidates first. That keeps the uniqueness checks
        of sparse boards fast.
        """
        self.solutions = []
        self._limit = limit
        state = self._occupancy()
        if state is not None:
            self._search_constrained(*state)
        return len(self.solutions)

    def _search_constrained(self, empties, rows, cols, boxes) -> bool:
        if not empties:
            self.solutions.append(copy_board(self.board))
            return True
        best, best_free, best_n = 0, 0, SIZE + 1
        for i, (r, c, b) in enumerate(empties):
            free = ~(rows[r] | cols[c] | boxes[b]) & ALL_VALUES
            n = bin(free).count("1")
            if n < best_n:
                best, best_free, best_n = i, free, n
                if n <= 1:
                    break
        if best_n == 0:
            return False
        row, col, box = empties[best]
        rest = empties[:best] + empties[best + 1:]
        for value in range(1, SIZE + 1):
            bit = 1 << value
            if not best_free & bit:
                continue
            self.board[row][col] = value
            rows[row] |= bit
            cols[col] |= bit
            boxes[box] |= bit
            found = self._search_constrained(rest, rows, cols, boxes)
            self.board[row][col] = 0
            rows[row] &= ~bit
            cols[col] &= ~bit
            boxes[box] &= ~bit
            if found and len(self.solutions) >= self._limit:
                return True
        return False

    def has_unique_solution(self) -> bool:
        """Exactly one completion.

        Same answer as ``solve(stop_after_second_solution=True)`` followed by
        ``len(self.solutions) == 1``: both stop at the second completion, and
        how many completions exist (up to two) does not depend on search order.
        """
        return self.count(limit=2) == 1


def has_unique_solution(board: Sequence[Sequence[int]]) -> bool:
    return SudokuSolver(board).has_unique_solution()


def find_solution(board: Sequence[Sequence[int]]) -> Optional[Grid]:
    """First completion in search order, or None if the board is dead."""
    solver = SudokuSolver(board)
    if not solver.solve(max_solutions=1):
        return None
    return solver.solutions[0]


def count_solutions(board: Sequence[Sequence[int]], limit: int = 2) -> int:
    return SudokuSolver(board).count(limit)
