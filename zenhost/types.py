"""Enumerations shared by the host services."""

from enum import Enum, IntEnum


class FriendState(IntEnum):
    """State of a friendship request between peers."""

    DEFAULT = 0
    WAIT = 1
    REQUEST = 2


class NotifyState(IntEnum):
    """Read state of a stored notification."""

    DYNAMIC = 0
    UNREAD = 1
    READ = 2


class NotifyType(IntEnum):
    """Kind of a notification."""

    UNIMPORTANT = 1
    NEED_CONFIRM = 2
    ERROR = 3
    INSTALL_LOG = 4
    PERSON_FRIEND_LEAVE = 5
    PERSON_FRIEND_LIVE = 6
    HEALTH_CHECK = 7


class NotifyClass(IntEnum):
    """Class a notification belongs to."""

    APP = 0


class PersonMessage(str, Enum):
    """Message kinds exchanged between peers."""

    ADD_FRIEND = "add_user"
    AGREE_FRIEND = "agree_user"
    DOWNLOAD = "file_data"
    SUMMARY = "summary"
    GET_IP = "get_ip"
    CONNECTION = "connection"
    DIRECTORY = "directory"
    HELLO = "hello"
    SHARE_ID = "share_id"
    UPLOAD = "upload"
    UPLOAD_DATA = "upload_data"
    INTERNAL_INSPECTION = "internal_inspection"
    PING = "ping"
    IMAGE_THUMBNAIL = "image_thumbnail"
    CANCEL = "cancel"


class PersonFileDirection(IntEnum):
    """Direction of a file transfer between peers."""

    DOWNLOAD = 0
    UPLOAD = 1
    RECEIVE_UPLOAD = 2


class DownloadState(IntEnum):
    """Progress state of a peer download."""

    AWAIT = 0
    DOWNLOADING = 1
    PAUSE = 2
    FINISH = 3
    ERROR = 4
    FINISHED = 5


class RelyType(IntEnum):
    """Kind of a dependency record."""

    MYSQL = 0


class SearchType(IntEnum):
    """Category of a search result."""

    APPLICATION = 0
    MEDIA = 1
    PICTURE = 2
    MUSIC = 3
    SEARCH = 4
    UNKNOWN = 5


class TaskType(IntEnum):
    """Owner of a task."""

    USER = 0
    APP = 1


class TaskDataType(IntEnum):
    """Payload kind of a task."""

    LINK = 0
    TEXT = 1


class TaskState(IntEnum):
    """Completion state of a task."""

    UNCOMPLETE = 0
    COMPLETED = 1