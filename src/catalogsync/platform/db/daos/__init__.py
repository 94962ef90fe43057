"""One data access object per catalog table."""

from .art_dao import ArtDAO
from .failed_file_dao import FailedFileDAO
from .media_type_dao import MediaTypeDAO
from .sync_state_dao import SyncStateDAO
from .track_dao import TrackDAO

__all__ = ["ArtDAO", "FailedFileDAO", "MediaTypeDAO", "SyncStateDAO", "TrackDAO"]
