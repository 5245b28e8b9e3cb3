"""Unit tests for MongoDB Flex create and partial update payload builders."""

from unittest.mock import Mock

import pytest

from stackctl.exceptions import (
    AmbiguousFlavorTargetError,
    APIError,
    CollaboratorError,
    InputError,
    InvalidFlavorError,
    InvalidInstanceTypeError,
    InvalidStorageError,
    MissingCatalogError,
    NoVersionsAvailableError,
)
from stackctl.services.mongodbflex.models import Instance
from stackctl.services.mongodbflex.payloads import (
    CreateInstanceInput,
    UpdateInstanceInput,
    build_create_payload,
    build_partial_update_payload,
    check_create_flavor_target,
)

PROJECT_ID = "0b7c6a4e-3c4b-4c1f-9f7a-3d5e8e6a1b21"
INSTANCE_ID = "5f1d2a3b-7c8e-4d9f-a0b1-c2d3e4f5a6b7"
REGION = "eu01"


def _update(**changes) -> UpdateInstanceInput:
    return UpdateInstanceInput(
        project_id=PROJECT_ID, instance_id=INSTANCE_ID, region=REGION, **changes
    )


def _create(**overrides) -> CreateInstanceInput:
    values = {
        "project_id": PROJECT_ID,
        "region": REGION,
        "instance_name": "my-instance",
        "acl": ["1.2.3.0/24"],
        "storage_size": 10,
        "flavor_id": "flavor-1x4",
        "storage_class": "CLASS",
    }
    values.update(overrides)
    return CreateInstanceInput(**values)


class TestUpdateInput:
    """Tests for UpdateInstanceInput."""

    def test_no_changes(self):
        assert not _update().has_changes()

    def test_has_changes(self):
        assert _update(instance_name="new").has_changes()
        assert _update(acl=[]).has_changes()


class TestPartialUpdateAmbiguity:
    """Flavor ID and CPU/RAM are mutually exclusive."""

    @pytest.mark.parametrize(
        "changes",
        [
            {"flavor_id": "flavor-1x4", "cpu": 2, "ram": 8},
            {"flavor_id": "flavor-1x4", "cpu": 2},
            {"flavor_id": "flavor-1x4", "ram": 8},
        ],
    )
    def test_rejected_before_any_call(self, changes):
        api = Mock()
        with pytest.raises(AmbiguousFlavorTargetError):
            build_partial_update_payload(_update(**changes), api)
        assert api.mock_calls == []


class TestPartialUpdatePayload:
    """Tests for build_partial_update_payload."""

    def test_name_only(self, mock_mongodbflex_api):
        payload = build_partial_update_payload(_update(instance_name="renamed"), mock_mongodbflex_api)
        assert payload.to_dict() == {"name": "renamed"}
        assert mock_mongodbflex_api.mock_calls == []

    def test_acl_and_backup_schedule(self, mock_mongodbflex_api):
        payload = build_partial_update_payload(
            _update(acl=["0.0.0.0/0"], backup_schedule="0 0 * * *"), mock_mongodbflex_api
        )
        assert payload.to_dict() == {
            "acl": {"items": ["0.0.0.0/0"]},
            "backupSchedule": "0 0 * * *",
        }

    def test_flavor_id(self, mock_mongodbflex_api):
        payload = build_partial_update_payload(_update(flavor_id="flavor-2x8"), mock_mongodbflex_api)
        assert payload.to_dict() == {"flavorId": "flavor-2x8"}
        mock_mongodbflex_api.list_flavors.assert_called_once_with(PROJECT_ID, REGION)

    def test_invalid_flavor_id(self, mock_mongodbflex_api):
        with pytest.raises(InvalidFlavorError):
            build_partial_update_payload(_update(flavor_id="flavor-99"), mock_mongodbflex_api)

    def test_cpu_and_ram(self, mock_mongodbflex_api):
        payload = build_partial_update_payload(_update(cpu=2, ram=8), mock_mongodbflex_api)
        assert payload.to_dict() == {"flavorId": "flavor-2x8"}
        mock_mongodbflex_api.get_instance.assert_not_called()

    def test_cpu_only_takes_ram_from_current_flavor(self, mock_mongodbflex_api, flavors):
        """Current flavor has 4 GB; 1 CPU + 4 GB resolves to flavor-1x4."""
        payload = build_partial_update_payload(_update(cpu=1), mock_mongodbflex_api)
        assert payload.flavor_id == "flavor-1x4"
        mock_mongodbflex_api.get_instance.assert_called_once_with(PROJECT_ID, INSTANCE_ID, REGION)

    def test_ram_only_without_matching_flavor(self, mock_mongodbflex_api):
        """1 CPU (current) + 8 GB has no flavor."""
        with pytest.raises(InvalidFlavorError):
            build_partial_update_payload(_update(ram=8), mock_mongodbflex_api)

    def test_cpu_only_current_instance_has_no_flavor(self, mock_mongodbflex_api):
        mock_mongodbflex_api.get_instance.return_value = Instance(id=INSTANCE_ID)
        with pytest.raises(MissingCatalogError):
            build_partial_update_payload(_update(cpu=2), mock_mongodbflex_api)

    def test_flavor_fetch_fails(self, mock_mongodbflex_api):
        mock_mongodbflex_api.list_flavors.side_effect = APIError("boom", status_code=500)
        with pytest.raises(CollaboratorError, match="get MongoDB Flex flavors"):
            build_partial_update_payload(_update(cpu=2, ram=8), mock_mongodbflex_api)

    def test_storage_class_only_has_no_size(self, mock_mongodbflex_api):
        payload = build_partial_update_payload(
            _update(storage_class="CLASS"), mock_mongodbflex_api
        )
        assert payload.to_dict() == {"storage": {"class": "CLASS"}}
        mock_mongodbflex_api.list_storages.assert_called_once_with(
            PROJECT_ID, "flavor-1x4", REGION
        )

    def test_storage_size_only(self, mock_mongodbflex_api):
        payload = build_partial_update_payload(_update(storage_size=50), mock_mongodbflex_api)
        assert payload.to_dict() == {"storage": {"size": 50}}

    def test_storage_validated_against_new_flavor(self, mock_mongodbflex_api):
        build_partial_update_payload(
            _update(flavor_id="flavor-2x8", storage_size=50), mock_mongodbflex_api
        )
        mock_mongodbflex_api.list_storages.assert_called_once_with(
            PROJECT_ID, "flavor-2x8", REGION
        )
        mock_mongodbflex_api.get_instance.assert_not_called()

    def test_current_instance_fetched_once(self, mock_mongodbflex_api):
        build_partial_update_payload(_update(cpu=1, storage_size=50), mock_mongodbflex_api)
        assert mock_mongodbflex_api.get_instance.call_count == 1

    def test_invalid_storage_class(self, mock_mongodbflex_api):
        with pytest.raises(InvalidStorageError):
            build_partial_update_payload(_update(storage_class="other"), mock_mongodbflex_api)

    @pytest.mark.parametrize("size", [9, 101])
    def test_invalid_storage_size(self, mock_mongodbflex_api, size):
        with pytest.raises(InvalidStorageError):
            build_partial_update_payload(_update(storage_size=size), mock_mongodbflex_api)

    def test_instance_fetch_fails(self, mock_mongodbflex_api):
        mock_mongodbflex_api.get_instance.side_effect = APIError("gone", status_code=404)
        with pytest.raises(CollaboratorError, match="get MongoDB Flex instance"):
            build_partial_update_payload(_update(storage_size=50), mock_mongodbflex_api)

    def test_storage_fetch_fails(self, mock_mongodbflex_api):
        mock_mongodbflex_api.list_storages.side_effect = APIError("boom", status_code=500)
        with pytest.raises(CollaboratorError, match="get MongoDB Flex storages"):
            build_partial_update_payload(_update(storage_size=50), mock_mongodbflex_api)

    def test_instance_type(self, mock_mongodbflex_api):
        payload = build_partial_update_payload(_update(instance_type="Sharded"), mock_mongodbflex_api)
        assert payload.to_dict() == {"replicas": 9}

    def test_invalid_instance_type(self, mock_mongodbflex_api):
        with pytest.raises(InvalidInstanceTypeError):
            build_partial_update_payload(_update(instance_type="Huge"), mock_mongodbflex_api)

    def test_version_passed_through(self, mock_mongodbflex_api):
        payload = build_partial_update_payload(_update(version="7.0"), mock_mongodbflex_api)
        assert payload.to_dict() == {"version": "7.0"}
        mock_mongodbflex_api.list_versions.assert_not_called()

    def test_all_fields(self, mock_mongodbflex_api):
        payload = build_partial_update_payload(
            _update(
                instance_name="example-name",
                acl=["0.0.0.0/0"],
                backup_schedule="0 0 * * *",
                cpu=2,
                ram=8,
                storage_class="class",
                storage_size=10,
                version="5.0",
                instance_type="Single",
            ),
            mock_mongodbflex_api,
        )
        assert payload.to_dict() == {
            "name": "example-name",
            "acl": {"items": ["0.0.0.0/0"]},
            "backupSchedule": "0 0 * * *",
            "flavorId": "flavor-2x8",
            "replicas": 1,
            "storage": {"class": "class", "size": 10},
            "version": "5.0",
        }


class TestCreatePayload:
    """Tests for build_create_payload."""

    def test_with_flavor_id(self, mock_mongodbflex_api):
        payload = build_create_payload(_create(version="6.0"), mock_mongodbflex_api)
        assert payload.to_dict() == {
            "name": "my-instance",
            "acl": {"items": ["1.2.3.0/24"]},
            "backupSchedule": "0 0/6 * * *",
            "flavorId": "flavor-1x4",
            "replicas": 3,
            "storage": {"class": "CLASS", "size": 10},
            "version": "6.0",
            "labels": {"type": "Replica"},
        }

    def test_with_cpu_and_ram(self, mock_mongodbflex_api):
        payload = build_create_payload(
            _create(flavor_id=None, cpu=2, ram=8, version="6.0"), mock_mongodbflex_api
        )
        assert payload.flavor_id == "flavor-2x8"

    def test_latest_version_by_default(self, mock_mongodbflex_api):
        payload = build_create_payload(_create(), mock_mongodbflex_api)
        assert payload.version == "6.0"

    def test_no_versions(self, mock_mongodbflex_api):
        mock_mongodbflex_api.list_versions.return_value = []
        with pytest.raises(NoVersionsAvailableError):
            build_create_payload(_create(), mock_mongodbflex_api)

    def test_instance_type_sets_replicas_and_label(self, mock_mongodbflex_api):
        payload = build_create_payload(
            _create(instance_type="Single", labels={"team": "db"}, version="6.0"),
            mock_mongodbflex_api,
        )
        assert payload.replicas == 1
        assert payload.labels == {"type": "Single", "team": "db"}

    def test_ambiguous_flavor(self):
        api = Mock()
        with pytest.raises(AmbiguousFlavorTargetError):
            build_create_payload(_create(cpu=2, ram=8), api)
        assert api.mock_calls == []

    def test_missing_flavor(self):
        api = Mock()
        with pytest.raises(InputError, match="--flavor-id"):
            build_create_payload(_create(flavor_id=None, cpu=2), api)
        assert api.mock_calls == []

    @pytest.mark.parametrize(
        "flavor_id,cpu,ram",
        [("f1", None, None), (None, 2, 8)],
    )
    def test_flavor_target_accepted(self, flavor_id, cpu, ram):
        check_create_flavor_target(flavor_id, cpu, ram)

    @pytest.mark.parametrize(
        "flavor_id,cpu,ram",
        [(None, None, None), (None, None, 8), (None, 2, None)],
    )
    def test_flavor_target_missing(self, flavor_id, cpu, ram):
        with pytest.raises(InputError, match="both --cpu and --ram"):
            check_create_flavor_target(flavor_id, cpu, ram)

    def test_invalid_storage(self, mock_mongodbflex_api):
        with pytest.raises(InvalidStorageError):
            build_create_payload(_create(storage_size=500), mock_mongodbflex_api)
