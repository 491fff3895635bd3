"""Base Pydantic model configuration for goauth SDK models.

All goauth models inherit from GoAuthBaseModel to ensure consistent behavior:
- Immutability (frozen=True) so a decoded response can be shared freely
- Lenient input (extra="ignore") so additive backend fields do not break decoding
- Flexible field naming (populate_by_name=True) for alias support
"""

from pydantic import BaseModel, ConfigDict


class GoAuthBaseModel(BaseModel):
    """Base model for all goauth payloads.

    Example:
        >>> class MyModel(GoAuthBaseModel):
        ...     name: str
        >>> MyModel.model_validate({"name": "test", "unknown": 1}).name
        'test'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        validate_default=True,
    )
