#!/usr/bin/env python3
"""
CRUD walkthrough with the User model.

1. Optionally create the Users table
2. Save a user
3. Fetch it back by key
4. Update age and address
5. Scan every user
6. Delete the user

Credentials come from the default AWS credential chain. Set
DYNAMODB_ENDPOINT_URL to run against DynamoDB Local or LocalStack.
"""

import argparse
import logging
import sys

from dynamodb_learning import DynamoDBBase, DynamoDBConfig, User


def main(argv=None) -> int:
    """Run the walkthrough; returns a process exit code."""
    parser = argparse.ArgumentParser(description="DynamoDB User CRUD example")
    parser.add_argument("--table-name", default="Users", help="Table holding the users")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--create-table", action="store_true", help="Create the table first (only needed once)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    table_name = args.table_name

    try:
        with DynamoDBBase(DynamoDBConfig(region_name=args.region)) as dynamodb:
            if args.create_table:
                print("Creating table...")
                dynamodb.create_table_for_model(User, table_name, wait=True)

            new_user = User(
                user_id="user001",
                first_name="John",
                last_name="Doe",
                age=30,
                address="123 Main Street, Springfield"
            )

            print("Saving user...")
            dynamodb.save_item(User, table_name, new_user)
            print("User saved successfully!")

            print("\nRetrieving user...")
            key_user = User(user_id="user001")
            retrieved_user = dynamodb.get_item_by_key(User, table_name, key_user)

            if retrieved_user is not None:
                print(f"Retrieved user: {retrieved_user}")

                print("\nUpdating user...")
                retrieved_user.age = 31
                retrieved_user.address = "456 Oak Avenue, Springfield"
                dynamodb.update_item_model(User, table_name, retrieved_user)
                print("User updated successfully!")
            else:
                print("User not found!")

            print("\nScanning all users...")
            all_users = dynamodb.scan_all_items(User, table_name)
            print(f"Found {len(all_users)} user(s):")
            for user in all_users:
                print(f"  - {user}")

            print("\nDeleting user...")
            deleted_user = dynamodb.delete_item_by_key(User, table_name, key_user)
            if deleted_user is not None:
                print(f"Deleted user: {deleted_user}")

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
