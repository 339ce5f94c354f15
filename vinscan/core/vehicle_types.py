"""Vehicle data contracts shared by the adapter and outer interfaces.

Architectural role:
    Defines the record that is progressively enriched across adapter calls
    (`VehicleAnalysis`), the enumerations that feed prompt variants and response
    schemas (`FuelType`, `ScanMode`), and the append-only conversation history
    passed back to the oracle on follow-up questions.

Wire format:
    Oracle replies and partial records use camelCase keys (`yearOfManufacture`,
    `licensePlate`, ...). `VehicleAnalysis` exposes snake_case attributes and
    maps them to camelCase aliases, so partial dicts can be merged directly.

Determinism:
    Every helper in this module is pure and deterministic.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FuelType(str, Enum):
    """Fuel categories accepted in oracle replies."""

    ESSENCE = "Essence"
    DIESEL = "Diesel"
    HYBRIDE = "Hybride"
    ELECTRIQUE = "Électrique"
    UNKNOWN = "N/A"


FUEL_TYPES = [fuel.value for fuel in FuelType]


class ScanMode(str, Enum):
    """Kind of photograph submitted to an image decode."""

    VIN = "vin"
    REGISTRATION = "carte grise"
    VEHICLE = "vehicule"


class VehicleAnalysis(BaseModel):
    """Mutable vehicle record enriched by successive adapter operations.

    All fields are optional. Values are stored as received: assignment is not
    validated, so the record accepts whatever an oracle partial carries. Keys
    unknown to the model are kept as extras.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        protected_namespaces=(),
    )

    vin: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    deduction_reasoning: Optional[str] = None
    year_of_manufacture: Optional[str] = None
    registration_year: Optional[str] = None
    motorization: Optional[str] = None
    fuel_type: Optional[str] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None
    inventory_notes: Optional[str] = None
    market_value_min: Optional[int] = None
    market_value_max: Optional[int] = None
    market_value_justification: Optional[str] = None

    def enrich(self, partial: Mapping[str, Any]) -> "VehicleAnalysis":
        """Merge a partial record into this one in place.

        Args:
            partial: Mapping keyed by wire names (camelCase) or attribute names.

        Returns:
            `self`, to allow chaining.

        Edge cases:
            - `None` values in `partial` overwrite nothing.
            - Unknown keys are stored as extras and survive `to_partial()`.
        """
        by_alias = {field.alias: name for name, field in type(self).model_fields.items()}
        for key, value in partial.items():
            if value is None:
                continue
            setattr(self, by_alias.get(key, key), value)
        return self

    def to_partial(self) -> dict:
        """Return the present fields as a camelCase partial record."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class ChatTurn:
    """One role-tagged message of a conversation (`user` or `model`)."""

    role: str
    text: str

    def __post_init__(self):
        if self.role not in ("user", "model"):
            raise ValueError(f"Unsupported chat role: {self.role!r}")


class ConversationHistory:
    """Append-only ordered sequence of `ChatTurn` values.

    Turns already recorded are never modified or removed; `turns` returns an
    immutable snapshot.
    """

    def __init__(self, turns=()):
        self._turns = [t if isinstance(t, ChatTurn) else ChatTurn(**t) for t in turns]

    def append(self, role: str, text: str) -> None:
        self._turns.append(ChatTurn(role=role, text=text))

    def record(self, question: str, answer: str) -> None:
        """Append a completed question/answer exchange."""
        self.append("user", question)
        self.append("model", answer)

    @property
    def turns(self) -> tuple:
        return tuple(self._turns)

    def __iter__(self) -> Iterator[ChatTurn]:
        return iter(tuple(self._turns))

    def __len__(self) -> int:
        return len(self._turns)


class VinSections(NamedTuple):
    """Fixed-offset ISO 3779 sections of a VIN."""

    wmi: str
    vds: str
    vis: str


def split_vin(vin: str) -> VinSections:
    """Cut a VIN into WMI `[0:3)`, VDS `[3:9)` and VIS `[9:17)` verbatim.

    No validation is applied: short inputs yield short or empty sections and
    characters past position 17 are ignored.
    """
    return VinSections(wmi=vin[0:3], vds=vin[3:9], vis=vin[9:17])
