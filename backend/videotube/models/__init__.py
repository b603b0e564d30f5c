from videotube.models.subscription import Subscription
from videotube.models.user import User
from videotube.models.video import Video
from videotube.models.watch_history import WatchHistoryEntry

__all__ = [
    "Subscription",
    "User",
    "Video",
    "WatchHistoryEntry",
]
