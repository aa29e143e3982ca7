"""Playback window for trimmed gallery videos."""

from app_builder.schemas.design_config import GalleryItem, MediaType


class TrimmedPlayback:
    """Keeps a video's playhead inside ``[start, end)``, looping at ``end``.

    ``on_time_update`` receives the player's current time and returns the
    time the player should be at. While the user is scrubbing the playhead is
    left alone.
    """

    def __init__(self, item: GalleryItem):
        self.start = item.start_time
        self.end = item.end_time
        self.active = item.media_type is MediaType.VIDEO and (
            self.start is not None or self.end is not None
        )

    def initial_position(self) -> float:
        return self.start or 0.0

    def on_time_update(self, current: float, *, scrubbing: bool = False) -> float:
        if not self.active or scrubbing:
            return current
        start = self.start or 0.0
        if self.end is not None and current >= self.end:
            return start
        if current < start:
            return start
        return current
