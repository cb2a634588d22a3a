from regionxl.domain.models import PageRect, SelectionRect, TextRun, Viewport
from regionxl.errors import SurfaceNotReady


def map_selection_to_page(rect: SelectionRect, surface_width: float, surface_height: float,
                          viewport: Viewport) -> PageRect:
    """
    Map a render-surface rectangle (origin top-left, y down) onto PDF page-space
    (origin bottom-left, y up). The returned y is the page-space y of the top edge.
    """
    if not surface_width or not surface_height or surface_width < 0 or surface_height < 0:
        raise SurfaceNotReady()

    # divide first: a full-surface rect then maps onto the exact page edges
    return PageRect(
        x=rect.x / surface_width * viewport.width,
        y=(surface_height - rect.y) / surface_height * viewport.height,
        width=rect.width / surface_width * viewport.width,
        height=rect.height / surface_height * viewport.height,
    )


def run_anchor(run: TextRun, viewport: Viewport) -> tuple[float, float]:
    """Anchor of a run, with y flipped into surface orientation (y down)."""
    return run.x, viewport.height - run.y


def contains_anchor(page_rect: PageRect, viewport: Viewport, x: float, y: float) -> bool:
    """
    Inclusive containment of a y-down anchor. The rectangle's top edge is flipped
    the same way so both sides of the comparison share one orientation.
    """
    if page_rect.is_degenerate:
        return False
    top = viewport.height - page_rect.y
    return (page_rect.x <= x <= page_rect.x + page_rect.width
            and top <= y <= top + page_rect.height)
