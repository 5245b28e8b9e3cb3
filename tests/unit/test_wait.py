"""Unit tests for wait handlers and label lookup."""

from unittest.mock import Mock, patch

import pytest

from stackctl.exceptions import APIError, ResourceNotFoundError, WaitError, WaitTimeoutError
from stackctl.labels import get_label
from stackctl.services.iaas.wait import delete_server_wait_handler, delete_volume_wait_handler
from stackctl.services.mongodbflex.models import Instance
from stackctl.services.mongodbflex.wait import (
    create_instance_wait_handler,
    delete_instance_wait_handler,
    update_instance_wait_handler,
)
from stackctl.wait import WaitHandler

PROJECT_ID = "0b7c6a4e-3c4b-4c1f-9f7a-3d5e8e6a1b21"
INSTANCE_ID = "5f1d2a3b-7c8e-4d9f-a0b1-c2d3e4f5a6b7"
REGION = "eu01"


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("stackctl.wait.time.sleep") as mock_sleep:
        yield mock_sleep


class TestWaitHandler:
    """Tests for the generic poll loop."""

    def test_done_on_first_check(self, no_sleep):
        handler = WaitHandler(lambda: (True, "resource"))
        assert handler.wait() == "resource"
        no_sleep.assert_not_called()

    def test_polls_until_done(self, no_sleep):
        check = Mock(side_effect=[(False, None), (False, None), (True, "ok")])
        handler = WaitHandler(check, poll_interval=2)

        assert handler.wait() == "ok"
        assert check.call_count == 3
        assert no_sleep.call_count == 2
        no_sleep.assert_called_with(2)

    def test_failure_state_propagates(self):
        check = Mock(side_effect=WaitError("failed"))
        with pytest.raises(WaitError, match="failed"):
            WaitHandler(check).wait()

    def test_timeout(self):
        # start, deadline check #1, deadline check #2 (past deadline), elapsed
        with patch("stackctl.wait.time.monotonic", side_effect=[0, 1, 11, 11]):
            handler = WaitHandler(
                lambda: (False, None), timeout=10, poll_interval=5, description="thing"
            )
            with pytest.raises(WaitTimeoutError, match="Timed out waiting for thing"):
                handler.wait()


class TestMongoDBFlexWaitHandlers:
    """Tests for instance create/update/delete waits."""

    @pytest.mark.parametrize(
        "factory", [create_instance_wait_handler, update_instance_wait_handler]
    )
    def test_until_ready(self, factory):
        api = Mock()
        api.get_instance.side_effect = [
            Instance(id=INSTANCE_ID, status="PROCESSING"),
            Instance(id=INSTANCE_ID, status="READY"),
        ]
        instance = factory(api, PROJECT_ID, INSTANCE_ID, REGION).wait()
        assert instance.status == "READY"

    def test_failed_status(self):
        api = Mock()
        api.get_instance.return_value = Instance(id=INSTANCE_ID, status="FAILED")
        with pytest.raises(WaitError, match="FAILED"):
            create_instance_wait_handler(api, PROJECT_ID, INSTANCE_ID, REGION).wait()

    def test_delete_until_not_found(self):
        api = Mock()
        api.get_instance.side_effect = [
            Instance(id=INSTANCE_ID, status="DELETING"),
            APIError("not found", status_code=404),
        ]
        assert delete_instance_wait_handler(api, PROJECT_ID, INSTANCE_ID, REGION).wait() is None

    def test_delete_other_error_propagates(self):
        api = Mock()
        api.get_instance.side_effect = APIError("server error", status_code=500)
        with pytest.raises(APIError):
            delete_instance_wait_handler(api, PROJECT_ID, INSTANCE_ID, REGION).wait()


class TestIaaSWaitHandlers:
    """Tests for IaaS delete waits."""

    def test_volume_deleted_status(self):
        api = Mock()
        api.get_volume.side_effect = [{"status": "DELETING"}, {"status": "DELETED"}]
        assert delete_volume_wait_handler(api, PROJECT_ID, "vol").wait() == {"status": "DELETED"}

    def test_server_not_found(self):
        api = Mock()
        api.get_server.side_effect = APIError("gone", status_code=404)
        assert delete_server_wait_handler(api, PROJECT_ID, "srv").wait() is None

    def test_error_status(self):
        api = Mock()
        api.get_volume.return_value = {"status": "ERROR"}
        with pytest.raises(WaitError):
            delete_volume_wait_handler(api, PROJECT_ID, "vol").wait()


class TestGetLabel:
    """Tests for the error-tolerant label lookup."""

    def test_resolved_name(self):
        assert get_label(lambda: "my-volume", "vol-1") == "my-volume"

    def test_falls_back_to_id(self):
        resolver = Mock(side_effect=ResourceNotFoundError("no name"))
        assert get_label(resolver, "vol-1") == "vol-1"

    def test_empty_name_falls_back_to_id(self):
        assert get_label(lambda: "", "vol-1") == "vol-1"

    def test_failure_logged_at_debug(self, caplog):
        resolver = Mock(side_effect=APIError("boom"))
        with caplog.at_level("DEBUG", logger="stackctl.labels"):
            get_label(resolver, "vol-1")
        assert "Could not get label for vol-1" in caplog.text
