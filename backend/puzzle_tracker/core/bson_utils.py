# backend/puzzle_tracker/core/bson_utils.py
# ObjectId compatible Pydantic v2 et modèle de base pour les documents Mongo (puzzle_logs, feed_items).
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic.json_schema import GetJsonSchemaHandler, JsonSchemaValue
from pydantic_core import core_schema


class PyObjectId(ObjectId):
    """ObjectId validé par Pydantic, sérialisé en chaîne hexadécimale.

    Description:
        Accepte un `ObjectId` ou une chaîne hex de 24 caractères; toute autre valeur
        est refusée. Côté OpenAPI, le champ apparaît comme une chaîne.
    """

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.json_or_python_schema(
            json_schema=core_schema.no_info_plain_validator_function(cls.validate),
            python_schema=core_schema.no_info_plain_validator_function(cls.validate),
            serialization=core_schema.plain_serializer_function_ser_schema(str, when_used="json"),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, core_schema_obj: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {
            "type": "string",
            "format": "objectid",
            "pattern": "^[a-fA-F0-9]{24}$",
            "examples": ["507f1f77bcf86cd799439011"],
        }

    @classmethod
    def validate(cls, value: Any) -> ObjectId:
        """Convertit `value` en ObjectId.

        Raises:
            ValueError: Si la valeur n'est ni un ObjectId ni une chaîne hex valide.
        """
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError(f"Invalid ObjectId: {value!r}")


def to_object_id(value: Any) -> ObjectId | None:
    """Version tolérante de `PyObjectId.validate` : None si la valeur est invalide."""
    try:
        return PyObjectId.validate(value)
    except ValueError:
        return None


class MongoBaseModel(BaseModel):
    """Modèle de document Mongo : `_id` exposé sous le nom `id`."""

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


def dump_mongo(model: BaseModel, *, exclude_none: bool = True) -> dict:
    """Dict prêt pour Mongo (alias `_id`, enums en valeurs brutes, None exclus)."""
    doc = model.model_dump(by_alias=True, exclude_none=exclude_none)
    for key, value in doc.items():
        if isinstance(value, Enum):
            doc[key] = value.value
    return doc
