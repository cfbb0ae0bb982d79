"""Shared pydantic base for response models.

Learn: Python attributes stay snake_case; JSON goes out camelCase
(``createdById``) to match what existing clients already read.
Only the serialization side is aliased, so ORM objects validate by
attribute name via from_attributes.
"""

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ReadModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )
