"""Pydantic bases shared by every model of the traversal state."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Dumps field names in camelCase.

    `model_dump(by_alias=True)` turns `steps_remaining` into `stepsRemaining`,
    which is the form the `inspect` command prints.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )


class StrictBaseModel(CamelModel):
    """Immutable, no coercion, no unknown fields."""

    model_config = CamelModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }
