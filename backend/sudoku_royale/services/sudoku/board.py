from typing import List, Sequence, Set, Tuple

SIZE = 9
BOX = 3

Grid = List[List[int]]
Pos = Tuple[int, int]


def empty_board() -> Grid:
    return [[0] * SIZE for _ in range(SIZE)]


def copy_board(board: Sequence[Sequence[int]]) -> Grid:
    return [list(row) for row in board]


def freeze_board(board: Sequence[Sequence[int]]) -> Tuple[Tuple[int, ...], ...]:
    return tuple(tuple(row) for row in board)


def box_origin(row: int, col: int) -> Pos:
    return row - row % BOX, col - col % BOX


def box_index(row: int, col: int) -> int:
    return (row // BOX) * BOX + col // BOX


def is_placement_legal(board: Sequence[Sequence[int]], row: int, col: int, value: int) -> bool:
    """Return True if ``value`` can go at (row, col) without repeating.

    Checks the row, the column and the 3x3 box for an equal value already
    on the board. Zero never collides.
    """
    if value == 0:
        return True
    for x in range(SIZE):
        if board[row][x] == value or board[x][col] == value:
            return False
    start_row, start_col = box_origin(row, col)
    for r in range(start_row, start_row + BOX):
        for c in range(start_col, start_col + BOX):
            if board[r][c] == value:
                return False
    return True


def count_clues(board: Sequence[Sequence[int]]) -> int:
    return sum(1 for row in board for v in row if v != 0)


def find_conflicts(board: Sequence[Sequence[int]]) -> Set[Pos]:
    """Cells whose nonzero value repeats in their row, column or box.

    Advisory only: player boards may hold conflicts while a game is on.
    """
    conflicts: Set[Pos] = set()
    units: List[List[Pos]] = []
    for i in range(SIZE):
        units.append([(i, j) for j in range(SIZE)])
        units.append([(j, i) for j in range(SIZE)])
    for br in range(0, SIZE, BOX):
        for bc in range(0, SIZE, BOX):
            units.append([(br + i, bc + j) for i in range(BOX) for j in range(BOX)])
    for unit in units:
        seen = {}
        for r, c in unit:
            v = board[r][c]
            if v == 0:
                continue
            if v in seen:
                conflicts.add((r, c))
                conflicts.add(seen[v])
            else:
                seen[v] = (r, c)
    return conflicts


def format_board(board: Sequence[Sequence[int]]) -> str:
    return "\n".join(" ".join(str(v or ".") for v in row) for row in board)
