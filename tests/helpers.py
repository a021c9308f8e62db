"""Test doubles and grid builders shared by the test modules."""

from infrastructure import Broadcaster, Subscriber
from models import Cell, Definition, Direction, Grid
from stores import MemoryStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeVision:
    """Stands in for the vision client: returns a fixed grid or raises."""

    def __init__(self, grid: Grid | None = None, error: Exception | None = None):
        self.grid = grid
        self.error = error
        self.calls: list[tuple[bytes, str]] = []

    def analyze_image(self, image_data: bytes, mime_type: str) -> Grid:
        self.calls.append((image_data, mime_type))
        if self.error is not None:
            raise self.error
        return self.grid or make_grid(3, 3)


def make_grid(rows: int, cols: int, definition_cells=()) -> Grid:
    """Build a grid of letter cells, with clue cells at `definition_cells`."""
    definition_cells = set(definition_cells)
    cells = []
    for r in range(rows):
        row = []
        for c in range(cols):
            if (r, c) in definition_cells:
                row.append(Cell(black=True, definitions=[Definition(text="Indice", direction=Direction.RIGHT)]))
            else:
                row.append(Cell())
        cells.append(row)
    return Grid(rows=rows, cols=cols, cells=cells)


def seed_grid(store: MemoryStore) -> Grid:
    """3x3 grid whose cells (0,0) and (1,0) are definition cells."""
    grid = Grid(
        rows=3,
        cols=3,
        cells=[
            [Cell(black=True, definitions=[Definition(text="Test", direction=Direction.RIGHT)]), Cell(), Cell()],
            [Cell(black=True, definitions=[Definition(text="Down", direction=Direction.DOWN)]), Cell(), Cell()],
            [Cell(), Cell(), Cell()],
        ],
    )
    return store.save_grid(grid)


class SingleFrameBroadcaster(Broadcaster):
    """Closes every subscriber after its first message, so an event stream ends on its own."""

    def subscribe(self, session_id: str) -> Subscriber:
        subscriber = super().subscribe(session_id)
        offer = subscriber.offer

        def offer_then_close(message: str) -> bool:
            accepted = offer(message)
            subscriber.close()
            return accepted

        subscriber.offer = offer_then_close
        return subscriber
