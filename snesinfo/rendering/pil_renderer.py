"""
SNES Header Info - PIL Renderer

Renders a 0x100-byte candidate window as a 16x16 grid PNG, one cell per
byte. Used by the visualize tool to see which bytes a rubric reads and
why a candidate scored the way it did.
"""

from PIL import Image, ImageDraw

from ..core.header_utils import CANDIDATE_WINDOW_SIZE, is_printable
from ..core.scoring import Heuristic, explain_window

GRID_WIDTH = 16
CELL_SIZE = 24
BORDER = 3

COLOR_ZERO = (40, 40, 40)
COLOR_PRINTABLE = (70, 160, 90)
COLOR_OTHER = (60, 90, 170)
COLOR_FIRED = (230, 60, 60)
COLOR_READ = (240, 200, 60)


def byte_color(value: int) -> tuple[int, int, int]:
    """Fill colour for a byte: zero, printable ASCII, or anything else."""
    if value == 0:
        return COLOR_ZERO
    if is_printable(value):
        return COLOR_PRINTABLE
    return COLOR_OTHER


def read_map(
    rubric: tuple[Heuristic, ...], window: bytes, calculated_size: int
) -> dict[int, bool]:
    """
    Map each window offset read by the rubric to whether any row reading
    it fired.
    """
    reads: dict[int, bool] = {}
    for row, fired in explain_window(rubric, window, calculated_size):
        for k in row.reads:
            reads[k] = reads.get(k, False) or fired
    return reads


def render_window_to_image(
    window: bytes,
    rubric: tuple[Heuristic, ...],
    calculated_size: int,
    cell_size: int = CELL_SIZE,
) -> Image.Image:
    """
    Render a candidate window to a PIL Image.

    Args:
        window: 0x100 bytes starting at a candidate base
        rubric: Rubric whose reads are outlined
        calculated_size: Image size passed to the rubric conditions
        cell_size: Cell edge in pixels

    Returns:
        PIL Image object

    Raises:
        ValueError: If window is not 0x100 bytes
    """
    if len(window) != CANDIDATE_WINDOW_SIZE:
        raise ValueError(
            f"Window must be {CANDIDATE_WINDOW_SIZE} bytes, got {len(window)}"
        )

    rows = CANDIDATE_WINDOW_SIZE // GRID_WIDTH
    img = Image.new("RGB", (GRID_WIDTH * cell_size, rows * cell_size))
    draw = ImageDraw.Draw(img)
    reads = read_map(rubric, window, calculated_size)

    for k, value in enumerate(window):
        x0 = (k % GRID_WIDTH) * cell_size
        y0 = (k // GRID_WIDTH) * cell_size
        box = (x0, y0, x0 + cell_size - 1, y0 + cell_size - 1)
        draw.rectangle(box, fill=byte_color(value))
        if k in reads:
            outline = COLOR_FIRED if reads[k] else COLOR_READ
            draw.rectangle(box, outline=outline, width=BORDER)

    return img
