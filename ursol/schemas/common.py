"""Base schema and shared field types."""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from ursol.core.exceptions import AppError
from ursol.utils.amounts import normalize_amount


def _parse_decimal(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
        raise ValueError("must be a decimal number or numeric string")
    try:
        return normalize_amount(value)
    except AppError as e:
        raise ValueError(e.message) from e


# Amount accepted as a number or numeric string ("50,000" included) and
# carried as canonical decimal text.
DecimalString = Annotated[str, BeforeValidator(_parse_decimal)]


class CamelModel(BaseModel):
    """Schema whose JSON keys are camelCase while attributes stay snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
