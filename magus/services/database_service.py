import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from aiobotocore.session import get_session
from botocore.exceptions import ClientError

from magus.core.config import Settings
from magus.core.exceptions import (
    CredentialStoreError,
    CredentialStoreUnavailableError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from magus.models.user import UserRecord

logger = logging.getLogger(__name__)


class DynamoDBUserStore:
    """Small wrapper around an aiobotocore DynamoDB client for user records.

    Items are keyed by the normalized ``email``; callers are expected to
    normalize before calling. The attribute names (``passwordHash``,
    ``createdAt``, ``updatedAt``) match the table provisioned for the app.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.table_name = settings.MAGUS_USER_AUTH_TABLE_NAME
        # aiobotocore session used to create async clients
        self.session = get_session()

    def _get_client(self):
        """Create an async DynamoDB client, used as ``async with client as dynamodb``."""
        client_kwargs: Dict[str, Any] = {"region_name": self.settings.AWS_DEFAULT_REGION}
        if self.settings.AWS_ACCESS_KEY_ID and self.settings.AWS_SECRET_ACCESS_KEY:
            client_kwargs["aws_access_key_id"] = self.settings.AWS_ACCESS_KEY_ID
            client_kwargs["aws_secret_access_key"] = self.settings.AWS_SECRET_ACCESS_KEY
        if self.settings.AWS_SESSION_TOKEN:
            client_kwargs["aws_session_token"] = self.settings.AWS_SESSION_TOKEN
        if self.settings.DYNAMODB_ENDPOINT_URL:
            client_kwargs["endpoint_url"] = self.settings.DYNAMODB_ENDPOINT_URL
        return self.session.create_client("dynamodb", **client_kwargs)

    # ---- Serialization helpers -------------------------------------------------
    @staticmethod
    def _serialize_value(value: Any) -> Dict[str, Any]:
        if isinstance(value, bool):
            return {"BOOL": value}
        if value is None:
            return {"NULL": True}
        if isinstance(value, datetime):
            return {"S": value.isoformat()}
        if isinstance(value, (int, float)):
            return {"N": str(value)}
        return {"S": str(value)}

    def _serialize_record(self, record: UserRecord) -> Dict[str, Any]:
        """Convert a UserRecord into a DynamoDB Item, dropping unset attributes."""
        data = record.model_dump(by_alias=True, exclude_none=True)
        return {key: self._serialize_value(value) for key, value in data.items()}

    @staticmethod
    def _deserialize_item(item: Dict[str, Any]) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for key, typed in item.items():
            # typed is a dict like {'S': 'value'} or {'N': '123'}
            type_key = next(iter(typed))
            val = typed[type_key]
            if type_key in ("S", "BOOL"):
                out[key] = val
            elif type_key == "N":
                out[key] = int(val) if val.lstrip("-").isdigit() else float(val)
            elif type_key == "NULL":
                out[key] = None
        return out

    def _to_record(self, item: Dict[str, Any]) -> UserRecord:
        return UserRecord.model_validate(self._deserialize_item(item))

    def _translate(self, error: ClientError, operation: str) -> CredentialStoreError:
        code = error.response.get("Error", {}).get("Code", "")
        if code == "ResourceNotFoundException":
            logger.error("DynamoDB table %s not found during %s", self.table_name, operation)
            return CredentialStoreUnavailableError()
        reason = error.response.get("Error", {}).get("Message") or code or "Unknown error"
        logger.error("DynamoDB %s failed on %s: %s", operation, self.table_name, reason)
        return CredentialStoreError(f"Failed to {operation}: {reason}")

    def _key(self, email: str) -> Dict[str, Any]:
        return {"email": {"S": email}}

    # ---- Public methods -------------------------------------------------------
    async def get_user(self, email: str, operation: str = "fetch user") -> Optional[UserRecord]:
        """Fetch a single user by normalized email, or None if absent.

        ``operation`` names the caller's action in error messages, since
        create and reset look the user up first.
        """
        try:
            async with self._get_client() as dynamodb:
                response = await dynamodb.get_item(TableName=self.table_name, Key=self._key(email))
        except ClientError as e:
            raise self._translate(e, operation) from e

        item = response.get("Item")
        logger.debug("Fetched user record for %s (found=%s)", email, bool(item))
        return self._to_record(item) if item else None

    async def list_users(self) -> List[UserRecord]:
        """Scan the whole table, following pagination until exhausted."""
        records: List[UserRecord] = []
        scan_kwargs: Dict[str, Any] = {"TableName": self.table_name}
        try:
            async with self._get_client() as dynamodb:
                while True:
                    response = await dynamodb.scan(**scan_kwargs)
                    records.extend(self._to_record(i) for i in response.get("Items", []))
                    last_key = response.get("LastEvaluatedKey")
                    if not last_key:
                        break
                    scan_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            raise self._translate(e, "fetch users") from e

        logger.debug("Scanned %d user records", len(records))
        return records

    async def create_user(self, record: UserRecord) -> None:
        """Put a new user. The write is conditional on the key being unused."""
        try:
            async with self._get_client() as dynamodb:
                await dynamodb.put_item(
                    TableName=self.table_name,
                    Item=self._serialize_record(record),
                    ConditionExpression="attribute_not_exists(email)",
                )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise UserAlreadyExistsError() from e
            raise self._translate(e, "create user") from e
        logger.info("Created user record for %s", record.email)

    async def update_password(self, email: str, password_hash: str, updated_at: datetime) -> None:
        """Replace the password hash of an existing user."""
        try:
            async with self._get_client() as dynamodb:
                await dynamodb.update_item(
                    TableName=self.table_name,
                    Key=self._key(email),
                    UpdateExpression="SET passwordHash = :passwordHash, updatedAt = :updatedAt",
                    ConditionExpression="attribute_exists(email)",
                    ExpressionAttributeValues={
                        ":passwordHash": {"S": password_hash},
                        ":updatedAt": {"S": updated_at.isoformat()},
                    },
                )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise UserNotFoundError() from e
            raise self._translate(e, "reset password") from e
        logger.info("Updated password hash for %s", email)

    async def delete_user(self, email: str) -> None:
        """Delete a user. Deleting an absent key is not an error."""
        try:
            async with self._get_client() as dynamodb:
                await dynamodb.delete_item(TableName=self.table_name, Key=self._key(email))
        except ClientError as e:
            raise self._translate(e, "delete user") from e
        logger.info("Deleted user record for %s", email)
