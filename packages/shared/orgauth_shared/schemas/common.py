from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

STATUS_SUCCESS = "success"


class CamelModel(BaseModel):
    """Wire models use camelCase keys; Python code uses snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TextInputModel(CamelModel):
    """Request body whose scalar values have already passed the field rules.

    Numbers and booleans arriving in text fields are kept as their string form.
    """

    @field_validator("*", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value


def success(message: str, data: Optional[Any] = None) -> dict[str, Any]:
    """The success envelope: ``{status, message[, data]}``."""
    body: dict[str, Any] = {"status": STATUS_SUCCESS, "message": message}
    if data is not None:
        body["data"] = data
    return body
