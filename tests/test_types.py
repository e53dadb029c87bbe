import pytest

from zenhost.types import (
    DownloadState,
    FriendState,
    NotifyClass,
    NotifyState,
    NotifyType,
    PersonFileDirection,
    PersonMessage,
    RelyType,
    SearchType,
    TaskDataType,
    TaskState,
    TaskType,
)


@pytest.mark.parametrize(
    "enum",
    [
        FriendState,
        NotifyState,
        NotifyClass,
        PersonFileDirection,
        DownloadState,
        RelyType,
        SearchType,
        TaskType,
        TaskDataType,
        TaskState,
    ],
)
def test_counted_enums_start_at_zero_and_are_contiguous(enum):
    assert [member.value for member in enum] == list(range(len(enum)))


def test_notify_type_starts_at_one_and_is_contiguous():
    looked_up = [NotifyType(value) for value in range(1, 8)]
    assert looked_up == list(NotifyType)
    assert NotifyType(1) is NotifyType.UNIMPORTANT
    assert NotifyType(7) is NotifyType.HEALTH_CHECK
    with pytest.raises(ValueError):
        NotifyType(0)


def test_notify_state_order_matches_read_progress():
    ordered = sorted([NotifyState(2), NotifyState(0), NotifyState(1)])
    assert ordered == [NotifyState.DYNAMIC, NotifyState.UNREAD, NotifyState.READ]


def test_download_state_finished_after_error():
    assert DownloadState(3) is DownloadState.FINISH
    assert DownloadState(4) is DownloadState.ERROR
    assert DownloadState(5) is DownloadState.FINISHED


@pytest.mark.parametrize(
    "text, member",
    [
        ("add_user", PersonMessage.ADD_FRIEND),
        ("agree_user", PersonMessage.AGREE_FRIEND),
        ("file_data", PersonMessage.DOWNLOAD),
        ("summary", PersonMessage.SUMMARY),
        ("get_ip", PersonMessage.GET_IP),
        ("connection", PersonMessage.CONNECTION),
        ("directory", PersonMessage.DIRECTORY),
        ("hello", PersonMessage.HELLO),
        ("share_id", PersonMessage.SHARE_ID),
        ("upload", PersonMessage.UPLOAD),
        ("upload_data", PersonMessage.UPLOAD_DATA),
        ("internal_inspection", PersonMessage.INTERNAL_INSPECTION),
        ("ping", PersonMessage.PING),
        ("image_thumbnail", PersonMessage.IMAGE_THUMBNAIL),
        ("cancel", PersonMessage.CANCEL),
    ],
)
def test_person_message_wire_values(text, member):
    assert PersonMessage(text) is member
    assert member == text


def test_unknown_person_message_is_rejected():
    with pytest.raises(ValueError):
        PersonMessage("not_a_message")


def test_int_enums_compare_as_ints():
    assert NotifyState(NotifyState.READ.value) is NotifyState.READ
    assert TaskState.COMPLETED + 0 == TaskState.COMPLETED.value