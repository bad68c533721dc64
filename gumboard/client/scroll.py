"""
Scroll Trigger.

Visibility sentinel placed after the last rendered note. When it comes
within `root_margin` of the viewport and at least `threshold` of it is
visible, the next page is requested. Positions are in whatever unit the
renderer scrolls by (pixels in a browser, rows in a terminal).
"""

from dataclasses import dataclass

from gumboard.client.feed import NotesFeed


@dataclass(frozen=True)
class Viewport:
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


def intersection_ratio(
    sentinel_top: float,
    sentinel_height: float,
    viewport: Viewport,
    root_margin: float = 0,
) -> float:
    """
    Fraction of the sentinel inside the viewport grown by root_margin on both ends.

    A zero-height sentinel counts as fully visible when it lies inside.
    """
    root_top = viewport.top - root_margin
    root_bottom = viewport.bottom + root_margin
    sentinel_bottom = sentinel_top + sentinel_height

    if sentinel_height <= 0:
        return 1.0 if root_top <= sentinel_top <= root_bottom else 0.0

    overlap = min(sentinel_bottom, root_bottom) - max(sentinel_top, root_top)
    return max(0.0, overlap) / sentinel_height


class ScrollTrigger:
    """
    Calls NotesFeed.load_more() when the sentinel becomes visible.

    Args:
        feed: Feed to advance
        root_margin: Lookahead added around the viewport
        threshold: Minimum visible fraction of the sentinel
    """

    def __init__(
        self,
        feed: NotesFeed,
        root_margin: float = 200,
        threshold: float = 0.1,
    ) -> None:
        self.feed = feed
        self.root_margin = root_margin
        self.threshold = threshold

    @property
    def mounted(self) -> bool:
        """The sentinel exists only while more pages remain."""
        return self.feed.has_more

    def is_intersecting(
        self,
        sentinel_top: float,
        sentinel_height: float,
        viewport: Viewport,
    ) -> bool:
        ratio = intersection_ratio(sentinel_top, sentinel_height, viewport, self.root_margin)
        return ratio > 0 and ratio >= self.threshold

    async def observe(
        self,
        sentinel_top: float,
        sentinel_height: float,
        viewport: Viewport,
    ) -> bool:
        """
        Report a new sentinel position.

        Returns:
            True if a page load was started
        """
        if not self.mounted or self.feed.loading:
            return False
        if not self.is_intersecting(sentinel_top, sentinel_height, viewport):
            return False
        return await self.feed.load_more()
