from typing import Any, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from injectree.domain.enums import FactoryKind
from injectree.domain.exceptions import InvalidRegistrationOptionsError


def _as_key_tuple(value: Any) -> Any:
    if isinstance(value, str):
        return (value,)
    return value


class RegistrationOptions(BaseModel):
    """Validated options accepted by ``register``.

    Attributes:
        constant: Store the value as-is instead of invoking it.
        singleton: Cache the first resolution for the lifetime of the tree.
        aggregate_on: Aggregator key(s) this registration rolls up into.
        dependencies: Explicit dependency keys, in the factory's positional order.
        kind: How the factory produces its value.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    constant: bool = Field(default=False, description="Register the value as a constant.")
    singleton: bool = Field(default=False, description="Cache the resolved value.")
    aggregate_on: Tuple[str, ...] = Field(
        default=(),
        description="Aggregator keys this registration is rolled up into.",
    )
    dependencies: Optional[Tuple[str, ...]] = Field(
        default=None,
        description="Explicit dependency keys. Derived from parameter names when omitted.",
    )
    kind: FactoryKind = Field(default=FactoryKind.FUNCTION, description="The factory shape.")

    @field_validator("aggregate_on", "dependencies", mode="before")
    @classmethod
    def _normalize_keys(cls, value: Any) -> Any:
        return _as_key_tuple(value)

    @classmethod
    def coerce(cls, options: Any) -> "RegistrationOptions":
        """Build options from ``None``, an options instance or a mapping.

        Raises:
            InvalidRegistrationOptionsError: If ``options`` is of any other type
                or does not validate.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise InvalidRegistrationOptionsError(
                f"Registration options must be a mapping, got {type(options).__name__}"
            )
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise InvalidRegistrationOptionsError(f"Invalid registration options: {e}") from e

    def with_overrides(self, **overrides: Any) -> "RegistrationOptions":
        return self.model_copy(update=overrides)


class Registration(BaseModel):
    """Registration record for a single key.

    The dependency list of an aggregator grows in place as other
    registrations aggregate onto it.

    Attributes:
        key: The registered key.
        value: Constant payload or factory.
        dependencies: Ordered dependency keys, passed positionally to the factory.
        is_constant: Whether ``value`` is the resolved value itself.
        is_singleton: Whether the resolved value is cached.
        kind: How the factory produces its value.
        is_aggregator: Whether the record was synthesized as an aggregator.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: str = Field(..., description="The registered key.")
    value: Any = Field(default=None, description="Constant payload or factory.")
    dependencies: List[str] = Field(default_factory=list, description="Ordered dependency keys.")
    is_constant: bool = Field(default=False, description="Whether the value is a constant.")
    is_singleton: bool = Field(default=False, description="Whether the resolution is cached.")
    kind: FactoryKind = Field(default=FactoryKind.FUNCTION, description="The factory shape.")
    is_aggregator: bool = Field(default=False, description="Whether this is a synthesized aggregator.")


class ResolvedEntry(BaseModel):
    """Cached resolution of a singleton key.

    Attributes:
        context: Construction context used to build the value, ``None`` for constants.
        value: The cached resolved value.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    context: Any = Field(default=None, description="The construction context.")
    value: Any = Field(default=None, description="The resolved value.")
