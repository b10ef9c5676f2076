"""Tests for the generic create/read/delete driver."""

from __future__ import annotations

import threading
from unittest.mock import patch

import pytest

from oci_kms_operator.sync.data import ResourceData
from oci_kms_operator.sync.driver import create_resource, delete_resource, read_resource
from oci_kms_operator.sync.identifiers import encode_key_version_id
from oci_kms_operator.sync.key_version import KeyVersionSync
from oci_kms_operator.utils.errors import (
    PollCancelledError,
    RemoteServiceError,
    ResourceNotFoundError,
    UnexpectedStateError,
)
from tests.helpers import KEY_ID, KEY_VERSION_ID, FakeKmsProvider, make_snapshot

COMPOSITE_ID = encode_key_version_id(KEY_ID, KEY_VERSION_ID)


class TestCreateResource:
    """Test cases for create_resource."""

    def test_create_waits_for_enabled(self, config):
        """Test that creation records the ID and projects the settled state."""
        client = FakeKmsProvider(get_results=[make_snapshot("CREATING"), make_snapshot("ENABLED")])
        data = ResourceData({"key_id": KEY_ID})
        sync = KeyVersionSync(client, data, config)

        create_resource(data, sync, config)

        assert data.id() == COMPOSITE_ID
        assert data.get("state") == "ENABLED"
        assert data.get("key_version_id") == KEY_VERSION_ID
        assert [call[0] for call in client.calls] == ["create", "get", "get"]

    def test_create_unexpected_state_keeps_id(self, config):
        """Test that a failed wait still leaves the new ID in local state."""
        client = FakeKmsProvider(get_results=[make_snapshot("DELETED")])
        data = ResourceData({"key_id": KEY_ID})
        sync = KeyVersionSync(client, data, config)

        with pytest.raises(UnexpectedStateError):
            create_resource(data, sync, config)

        assert data.id() == COMPOSITE_ID
        assert data.get("state") is None

    @pytest.mark.parametrize(
        "state", ["DISABLING", "CANCELLING_DELETION", "UPDATING", "BACKUP_IN_PROGRESS", "RESTORING"]
    )
    def test_create_states_outside_wait_tables(self, config, state):
        """Test that service states with no wait table entry stop the wait."""
        client = FakeKmsProvider(get_results=[make_snapshot(state)])
        data = ResourceData({"key_id": KEY_ID})

        with pytest.raises(UnexpectedStateError):
            create_resource(data, KeyVersionSync(client, data, config), config)

    def test_create_error_leaves_no_id(self, config):
        """Test that a failed create does not record an ID."""
        client = FakeKmsProvider(create_error=RemoteServiceError("quota exceeded", status=400))
        data = ResourceData({"key_id": KEY_ID})
        sync = KeyVersionSync(client, data, config)

        with pytest.raises(RemoteServiceError):
            create_resource(data, sync, config)

        assert data.id() == ""
        assert client.calls == [("create", KEY_ID)]

    def test_create_cancelled(self, config):
        """Test that a set cancel event stops the wait after creation."""
        client = FakeKmsProvider()
        data = ResourceData({"key_id": KEY_ID})
        sync = KeyVersionSync(client, data, config)
        event = threading.Event()
        event.set()

        with pytest.raises(PollCancelledError):
            create_resource(data, sync, config, cancel_event=event)

        assert data.id() == COMPOSITE_ID
        assert client.calls == [("create", KEY_ID)]

    def test_create_records_operation_metric(self, config):
        """Test that successful creation is counted."""
        client = FakeKmsProvider(get_results=[make_snapshot("ENABLED")])
        data = ResourceData({"key_id": KEY_ID})
        sync = KeyVersionSync(client, data, config)

        with patch("oci_kms_operator.sync.driver.metrics") as mock_metrics:
            create_resource(data, sync, config)

        mock_metrics.key_version_operations_total.labels.assert_called_once_with(
            operation="create", result="success"
        )


class TestReadResource:
    """Test cases for read_resource."""

    def test_read_projects_state(self, config):
        """Test that a read refreshes local state."""
        client = FakeKmsProvider(get_results=[make_snapshot("DISABLED")])
        data = ResourceData({}, COMPOSITE_ID)

        read_resource(KeyVersionSync(client, data, config))

        assert data.get("state") == "DISABLED"
        assert data.get("key_id") == KEY_ID

    def test_read_not_found_propagates(self, config):
        """Test that a missing resource leaves the pruning decision to the caller."""
        client = FakeKmsProvider(get_results=[ResourceNotFoundError("gone")])
        data = ResourceData({"state": "ENABLED"}, COMPOSITE_ID)

        with pytest.raises(ResourceNotFoundError):
            read_resource(KeyVersionSync(client, data, config))

        assert data.id() == COMPOSITE_ID
        assert data.get("state") == "ENABLED"


class TestDeleteResource:
    """Test cases for delete_resource."""

    def test_delete_waits_for_pending_deletion(self, config):
        """Test that deletion polls until the version is pending deletion."""
        client = FakeKmsProvider(
            get_results=[make_snapshot("SCHEDULING_DELETION"), make_snapshot("PENDING_DELETION")]
        )
        data = ResourceData({}, COMPOSITE_ID)

        assert delete_resource(data, KeyVersionSync(client, data, config), config) is True

        assert data.id() == ""
        assert [call[0] for call in client.calls] == ["delete", "get", "get"]

    def test_delete_not_found_is_success(self, config):
        """Test that a version that vanished during the wait counts as deleted."""
        client = FakeKmsProvider(get_results=[ResourceNotFoundError("gone")])
        data = ResourceData({}, COMPOSITE_ID)

        assert delete_resource(data, KeyVersionSync(client, data, config), config) is True
        assert data.id() == ""

    def test_delete_already_deleted_is_success(self, config):
        """Test that a version already gone when deletion is scheduled counts as deleted."""
        client = FakeKmsProvider(delete_error=ResourceNotFoundError("key version not found"))
        data = ResourceData({}, COMPOSITE_ID)

        with patch("oci_kms_operator.sync.driver.metrics") as mock_metrics:
            assert delete_resource(data, KeyVersionSync(client, data, config), config) is True

        assert data.id() == ""
        assert [call[0] for call in client.calls] == ["delete"]
        mock_metrics.key_version_operations_total.labels.assert_called_once_with(
            operation="delete", result="not_found"
        )

    def test_delete_remote_error_propagates(self, config):
        """Test that other remote errors keep the ID for a retry."""
        client = FakeKmsProvider(delete_error=RemoteServiceError("conflict", status=409))
        data = ResourceData({}, COMPOSITE_ID)

        with pytest.raises(RemoteServiceError):
            delete_resource(data, KeyVersionSync(client, data, config), config)

        assert data.id() == COMPOSITE_ID

    def test_delete_unexpected_state(self, config):
        """Test that an enabled version after scheduling deletion is an error."""
        client = FakeKmsProvider(get_results=[make_snapshot("ENABLED")])
        data = ResourceData({}, COMPOSITE_ID)

        with pytest.raises(UnexpectedStateError):
            delete_resource(data, KeyVersionSync(client, data, config), config)

        assert data.id() == COMPOSITE_ID

    def test_delete_disabled_skips_remote(self, guarded_config):
        """Test that disabled deletion clears local state without any remote call."""
        client = FakeKmsProvider()
        data = ResourceData({}, COMPOSITE_ID)

        with patch("oci_kms_operator.sync.driver.metrics") as mock_metrics:
            assert delete_resource(data, KeyVersionSync(client, data, guarded_config), guarded_config) is False

        assert client.calls == []
        assert data.id() == ""
        mock_metrics.key_version_operations_total.labels.assert_called_once_with(
            operation="delete", result="skipped"
        )
