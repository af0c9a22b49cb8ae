from decimal import Decimal
from typing import Annotated, Any, Self
from uuid import UUID, uuid4

from bson.codec_options import TypeCodec, TypeRegistry
from bson.decimal128 import Decimal128
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pymongo.asynchronous.cursor import AsyncCursor

# Decimal in memory, Decimal128 in MongoDB, plain number in JSON responses
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class DecimalCodec(TypeCodec):
    """Store Python Decimal values as BSON Decimal128 and read them back as Decimal."""

    python_type = Decimal
    bson_type = Decimal128

    def transform_python(self, value: Decimal) -> Decimal128:
        return Decimal128(value)

    def transform_bson(self, value: Decimal128) -> Decimal:
        return value.to_decimal()


TYPE_REGISTRY = TypeRegistry([DecimalCodec()])


def to_decimal(value: Any) -> Decimal:
    """Coerce a numeric value read from MongoDB (Decimal128, int, float, Decimal) to Decimal."""
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class MongoModel(BaseModel):
    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]
