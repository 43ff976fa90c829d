"""DynamoDB service wrapper for the rental record store."""

import os
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

# Module-level singleton for connection reuse
_dynamodb_service_instance: "DynamoDBService | None" = None

RENTALS_TABLE = "rentals"
CAMERAS_TABLE = "cameras"
CAMERA_INDEX = "camera_id-index"


def get_dynamodb_service(environment: str | None = None) -> "DynamoDBService":
    """Get or create the singleton DynamoDB service instance.

    Args:
        environment: Environment name. Only used on first call.

    Returns:
        Shared DynamoDBService instance
    """
    global _dynamodb_service_instance
    if _dynamodb_service_instance is None:
        _dynamodb_service_instance = DynamoDBService(environment)
    return _dynamodb_service_instance


def reset_dynamodb_service() -> None:
    """Reset the singleton instance (for testing only).

    This allows tests to create a fresh DynamoDBService inside
    a mock_aws context.
    """
    global _dynamodb_service_instance
    _dynamodb_service_instance = None


class DynamoDBService:
    """Service for DynamoDB operations with environment-aware table names."""

    def __init__(self, environment: str | None = None) -> None:
        """Initialize DynamoDB service.

        Args:
            environment: Environment name (dev/prod). Defaults to ENVIRONMENT env var.
        """
        self.environment = environment or os.getenv("ENVIRONMENT", "dev")
        # Allow override via DYNAMODB_TABLE_PREFIX for testing
        self.name_prefix = os.getenv(
            "DYNAMODB_TABLE_PREFIX", f"camrent-{self.environment}"
        )
        self._dynamodb = boto3.resource("dynamodb")

    def _table_name(self, table: str) -> str:
        """Get full table name with prefix."""
        return f"{self.name_prefix}-{table}"

    def _get_table(self, table: str) -> Any:
        """Get DynamoDB table resource."""
        return self._dynamodb.Table(self._table_name(table))

    # Generic CRUD operations

    def get_item(
        self,
        table: str,
        key: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Get a single item by key.

        Args:
            table: Table name without prefix
            key: Primary key dict

        Returns:
            Item dict or None if not found
        """
        response = self._get_table(table).get_item(Key=key)
        item: dict[str, Any] | None = response.get("Item")
        return item

    def put_item(
        self,
        table: str,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> bool:
        """Put an item into the table.

        Args:
            table: Table name without prefix
            item: Item to store
            condition_expression: Optional condition for write

        Returns:
            True if successful, False if condition failed
        """
        try:
            kwargs: dict[str, Any] = {"Item": item}
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression

            self._get_table(table).put_item(**kwargs)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            raise

    def delete_item(
        self,
        table: str,
        key: dict[str, Any],
        condition_expression: Any | None = None,
    ) -> bool:
        """Delete an item by key.

        Args:
            table: Table name without prefix
            key: Primary key dict
            condition_expression: Optional condition for delete

        Returns:
            True if deleted (or didn't exist), False if condition failed
        """
        try:
            kwargs: dict[str, Any] = {"Key": key}
            if condition_expression is not None:
                kwargs["ConditionExpression"] = condition_expression
            self._get_table(table).delete_item(**kwargs)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            raise

    def query(
        self,
        table: str,
        key_condition: Any,
        index_name: str | None = None,
        filter_expression: Any | None = None,
    ) -> list[dict[str, Any]]:
        """Query table or GSI, following pagination.

        Args:
            table: Table name without prefix
            key_condition: Boto3 Key condition
            index_name: GSI name (optional)
            filter_expression: Additional filter (optional)

        Returns:
            List of items
        """
        kwargs: dict[str, Any] = {"KeyConditionExpression": key_condition}
        if index_name:
            kwargs["IndexName"] = index_name
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression

        return self._paginate(self._get_table(table).query, kwargs)

    def scan(
        self,
        table: str,
        filter_expression: Any | None = None,
    ) -> list[dict[str, Any]]:
        """Scan a whole table, following pagination.

        Args:
            table: Table name without prefix
            filter_expression: Boto3 Attr condition (optional)

        Returns:
            List of items
        """
        kwargs: dict[str, Any] = {}
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression

        return self._paginate(self._get_table(table).scan, kwargs)

    def _paginate(self, operation: Any, kwargs: dict[str, Any]) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        while True:
            response = operation(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def query_by_gsi(
        self,
        table: str,
        index_name: str,
        partition_key_name: str,
        partition_key_value: str,
        filter_expression: Any | None = None,
    ) -> list[dict[str, Any]]:
        """Query a GSI by partition key.

        Args:
            table: Table name without prefix
            index_name: GSI name
            partition_key_name: Name of partition key attribute
            partition_key_value: Value to query
            filter_expression: Optional non-key filter

        Returns:
            List of items
        """
        key_condition = Key(partition_key_name).eq(partition_key_value)
        return self.query(
            table,
            key_condition,
            index_name=index_name,
            filter_expression=filter_expression,
        )

    # =========================================================================
    # Rental-specific methods
    # =========================================================================

    def get_rental(self, rental_id: str) -> dict[str, Any] | None:
        """Get a rental record by id."""
        return self.get_item(RENTALS_TABLE, {"id": rental_id})

    def create_rental(self, rental: dict[str, Any]) -> bool:
        """Create a rental record. Returns False if the id is taken."""
        return self.put_item(
            RENTALS_TABLE,
            rental,
            condition_expression="attribute_not_exists(id)",
        )

    def replace_rental(self, rental: dict[str, Any]) -> bool:
        """Overwrite an existing rental record. Returns False if it is gone."""
        return self.put_item(
            RENTALS_TABLE,
            rental,
            condition_expression="attribute_exists(id)",
        )

    def delete_rental(self, rental_id: str, booking_type: str | None = None) -> bool:
        """Delete a rental, optionally only if it has the given booking_type."""
        condition = Attr("booking_type").eq(booking_type) if booking_type else None
        return self.delete_item(RENTALS_TABLE, {"id": rental_id}, condition)

    def list_rentals(self, filter_expression: Any | None = None) -> list[dict[str, Any]]:
        """All rental records matching an optional filter."""
        return self.scan(RENTALS_TABLE, filter_expression)

    def list_rentals_in_range(self, start_date: str, end_date: str) -> list[dict[str, Any]]:
        """Rentals touching an inclusive ISO date range."""
        return self.list_rentals(
            Attr("start_date").lte(end_date) & Attr("end_date").gte(start_date)
        )

    def get_rentals_by_camera(self, camera_id: str) -> list[dict[str, Any]]:
        """All rentals for one camera via the camera GSI."""
        return self.query_by_gsi(
            table=RENTALS_TABLE,
            index_name=CAMERA_INDEX,
            partition_key_name="camera_id",
            partition_key_value=camera_id,
        )

    def list_cameras(self) -> list[dict[str, Any]]:
        """All camera records."""
        return self.scan(CAMERAS_TABLE)
