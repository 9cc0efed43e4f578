"""
Model operations against a moto DynamoDB.

Covers the User lifecycle: save, fetch, overwrite, update, delete and scan.
"""

import pytest
from botocore.exceptions import ClientError

from dynamodb_learning import InvalidArgumentError, User


class TestUserLifecycle:
    """Test CRUD on the Users table through the model surface."""

    def test_round_trip(self, dynamodb_base, users_table, sample_user):
        dynamodb_base.save_item(User, users_table, sample_user)

        fetched = dynamodb_base.get_item_by_key(User, users_table, User(user_id="user123"))

        assert fetched == sample_user
        assert fetched.age == 30
        assert isinstance(fetched.age, int)

    def test_save_twice_overwrites(self, dynamodb_base, users_table, sample_user):
        dynamodb_base.save_item(User, users_table, sample_user)
        dynamodb_base.save_item(User, users_table, sample_user)

        stored = dynamodb_base.scan_all_items(User, users_table)

        assert stored == [sample_user]

    def test_save_replaces_fields(self, dynamodb_base, users_table, sample_user):
        dynamodb_base.save_item(User, users_table, sample_user)
        dynamodb_base.save_item(User, users_table, User(user_id="user123", first_name="Johnny"))

        fetched = dynamodb_base.get_item_by_key(User, users_table, User(user_id="user123"))

        assert fetched == User(user_id="user123", first_name="Johnny")

    def test_update_then_fetch(self, dynamodb_base, users_table, sample_user):
        dynamodb_base.save_item(User, users_table, sample_user)
        changed = sample_user.model_copy(update={"age": 31})

        updated = dynamodb_base.update_item_model(User, users_table, changed)
        fetched = dynamodb_base.get_item_by_key(User, users_table, User(user_id="user123"))

        assert updated == changed
        assert fetched.age == 31
        assert fetched.first_name == "John"
        assert fetched.last_name == "Doe"
        assert fetched.address == "123 Main St"

    def test_update_removes_cleared_fields(self, dynamodb_base, users_table, sample_user):
        dynamodb_base.save_item(User, users_table, sample_user)
        sample_user.address = None

        updated = dynamodb_base.update_item_model(User, users_table, sample_user)

        assert updated.address is None
        fetched = dynamodb_base.get_item_by_key(User, users_table, User(user_id="user123"))
        assert fetched.address is None
        assert fetched.age == 30

    def test_update_creates_missing_item(self, dynamodb_base, users_table):
        user = User(user_id="new-user", first_name="Ada", age=36)

        dynamodb_base.update_item_model(User, users_table, user)

        assert dynamodb_base.get_item_by_key(User, users_table, User(user_id="new-user")) == user

    def test_delete_then_fetch(self, dynamodb_base, users_table, sample_user):
        dynamodb_base.save_item(User, users_table, sample_user)

        deleted = dynamodb_base.delete_item_by_key(User, users_table, User(user_id="user123"))

        assert deleted == sample_user
        assert dynamodb_base.get_item_by_key(User, users_table, User(user_id="user123")) is None

    def test_delete_missing_item(self, dynamodb_base, users_table):
        assert dynamodb_base.delete_item_by_key(User, users_table, User(user_id="ghost")) is None

    def test_get_missing_item(self, dynamodb_base, users_table):
        assert dynamodb_base.get_item_by_key(User, users_table, User(user_id="ghost")) is None

    def test_scan_completeness(self, dynamodb_base, users_table, sample_users):
        for user in sample_users:
            dynamodb_base.save_item(User, users_table, user)

        scanned = dynamodb_base.scan_all_items(User, users_table)

        assert len(scanned) == 5
        by_id = {user.user_id: user for user in scanned}
        assert by_id == {user.user_id: user for user in sample_users}

    def test_scan_across_pages(self, dynamodb_base, users_table, sample_users):
        for user in sample_users:
            dynamodb_base.save_item(User, users_table, user)
        table = dynamodb_base.get_table(User, users_table)

        scan = table.scan(page_size=2)
        pages = list(scan.pages())

        assert len(pages) >= 3
        assert sorted(u.user_id for u in scan) == sorted(u.user_id for u in sample_users)

    def test_scan_empty_table(self, dynamodb_base, users_table):
        assert dynamodb_base.scan_all_items(User, users_table) == []

    def test_save_without_key_rejected(self, dynamodb_base, users_table):
        with pytest.raises(InvalidArgumentError):
            dynamodb_base.save_item(User, users_table, User(first_name="Nobody"))

        assert dynamodb_base.scan_all_items(User, users_table) == []

    def test_missing_table_error_passes_through(self, dynamodb_base, sample_user):
        with pytest.raises(ClientError) as exc_info:
            dynamodb_base.save_item(User, "NoSuchTable", sample_user)

        assert exc_info.value.response['Error']['Code'] == 'ResourceNotFoundException'


class TestModelTables:
    """Test table creation from the model."""

    def test_create_table_for_model(self, dynamodb_base):
        dynamodb_base.create_table_for_model(User, "Users", wait=True)

        table = dynamodb_base.describe_table("Users")['Table']

        assert table['KeySchema'] == [{'AttributeName': 'user_id', 'KeyType': 'HASH'}]
        assert table['AttributeDefinitions'] == [{'AttributeName': 'user_id', 'AttributeType': 'S'}]
        assert table['BillingModeSummary']['BillingMode'] == 'PAY_PER_REQUEST'

    def test_create_existing_table_fails(self, dynamodb_base, users_table):
        with pytest.raises(ClientError) as exc_info:
            dynamodb_base.create_table_for_model(User, users_table)

        assert exc_info.value.response['Error']['Code'] == 'ResourceInUseException'

    def test_close_twice(self, dynamodb_base, users_table):
        dynamodb_base.scan_all_items(User, users_table)

        dynamodb_base.close()
        dynamodb_base.close()

        assert dynamodb_base.closed is True
