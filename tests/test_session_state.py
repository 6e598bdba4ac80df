from unittest.mock import patch
from csvchat.models.schemas import Notification
from csvchat.utils.session import open_session


@patch("csvchat.utils.session.st")
def test_open_session_clears_pending_upload_and_notification(mock_st):
    mock_st.session_state = {
        "current_session": "session-a",
        "pending_upload": object(),
        "last_notification": Notification(title="Parse error", description="boom", variant="destructive"),
    }
    open_session("session-b")
    assert mock_st.session_state == {
        "current_session": "session-b",
        "pending_upload": None,
        "last_notification": None,
    }
