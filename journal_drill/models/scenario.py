"""
Scenario Models for Bond Journal Drill

These models define the strict schemas for the drill content and for
what a student types into the journal entry form.
They are designed to:
1. Reject malformed or unbalanced content at load time
2. Accept the loose values a form produces (blank cells, "1,000")
3. Be serializable for storage and logging

DESIGN DECISION: Amounts are Decimal, never float.
Scenario content may be authored with camelCase keys (faceValue,
keyCalculations, ...) or snake_case field names.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# Largest difference between two amounts that still counts as equal.
BALANCE_TOLERANCE = Decimal("0.01")

ZERO = Decimal("0")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class BondType(str, Enum):
    """How the bond was priced relative to its face value."""
    FACE = "face"
    PREMIUM = "premium"
    DISCOUNT = "discount"


# =============================================================================
# JOURNAL LINES
# =============================================================================

class SolutionLine(BaseModel):
    """
    One account/debit/credit line of a canonical answer.

    A line carries at most one nonzero side.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    account: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Canonical account name"
    )
    debit: Optional[Decimal] = Field(
        default=None,
        ge=0,
        decimal_places=2,
        description="Debit amount, absent for credit lines"
    )
    credit: Optional[Decimal] = Field(
        default=None,
        ge=0,
        decimal_places=2,
        description="Credit amount, absent for debit lines"
    )

    @model_validator(mode='after')
    def validate_single_side(self) -> 'SolutionLine':
        """A line cannot carry both a debit and a credit."""
        if self.debit_amount > 0 and self.credit_amount > 0:
            raise ValueError(
                f"Solution line '{self.account}' has both a debit and a credit"
            )
        return self

    @property
    def debit_amount(self) -> Decimal:
        return self.debit if self.debit is not None else ZERO

    @property
    def credit_amount(self) -> Decimal:
        return self.credit if self.credit is not None else ZERO


class CandidateLine(BaseModel):
    """
    One line of the journal entry a student submits.

    Every cell may be blank. Amount cells accept form text:
    surrounding spaces and thousands separators are removed,
    an empty cell becomes None.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    account: str = Field(
        default="",
        max_length=100,
        description="Account name as typed"
    )
    debit: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Debit amount, None if the cell is blank"
    )
    credit: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Credit amount, None if the cell is blank"
    )

    @field_validator('account', mode='before')
    @classmethod
    def none_account_is_blank(cls, v):
        return "" if v is None else v

    @field_validator('debit', 'credit', mode='before')
    @classmethod
    def blank_amount_is_none(cls, v):
        """Turn blank form cells into None and drop thousands separators."""
        if isinstance(v, str):
            cleaned = v.strip().replace(",", "")
            return cleaned or None
        return v

    @property
    def is_filled(self) -> bool:
        """Has an account name and at least one amount."""
        return bool(self.account) and (
            self.debit is not None or self.credit is not None
        )

    @property
    def debit_amount(self) -> Decimal:
        return self.debit if self.debit is not None else ZERO

    @property
    def credit_amount(self) -> Decimal:
        return self.credit if self.credit is not None else ZERO

    @classmethod
    def from_form(cls, raw: dict) -> "CandidateLine":
        """
        Build a line from raw form cells without rejecting any input.

        A non-blank amount cell that is not a non-negative number
        ("abc", "-1000", "nan") still fills the line, with amount 0.
        """
        account = raw.get("account")
        account = "" if account is None else str(account)[:100]
        return cls(
            account=account,
            debit=parse_amount_cell(raw.get("debit")),
            credit=parse_amount_cell(raw.get("credit")),
        )


def parse_amount_cell(value) -> Optional[Decimal]:
    """Blank cells are None; anything unreadable or negative is 0."""
    if value is None:
        return None
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        text = str(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None

    try:
        amount = Decimal(text)
    except InvalidOperation:
        return ZERO

    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


# =============================================================================
# SCENARIO
# =============================================================================

class Scenario(BaseModel):
    """
    One drill unit: bond details, a task and its canonical journal entry.

    CRITICAL: The solution must balance. A scenario whose debits and
    credits differ by more than BALANCE_TOLERANCE is rejected when it
    is constructed, so the verifier never sees one.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int = Field(
        ...,
        gt=0,
        description="Unique id, also defines catalog order"
    )

    # Bond details shown to the student
    face_value: Decimal = Field(..., ge=0)
    issue_price: Decimal = Field(..., ge=0)
    stated_rate: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Coupon rate as a fraction (0.08 = 8%)"
    )
    effective_rate: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Market rate as a fraction"
    )
    life_years: Optional[int] = Field(default=None, gt=0)
    payment_frequency: Optional[str] = Field(
        default=None,
        max_length=30,
        description="e.g. 'Semiannually'"
    )
    bond_type: BondType

    task: str = Field(..., min_length=1)
    solution: tuple[SolutionLine, ...] = Field(..., min_length=1)

    # Shown after a correct answer and next to the solution
    key_calculations: dict[str, str] = Field(default_factory=dict)
    success_message: Optional[str] = None

    @model_validator(mode='after')
    def validate_solution_balances(self) -> 'Scenario':
        """Debits must equal credits across the solution."""
        if abs(self.total_debit - self.total_credit) > BALANCE_TOLERANCE:
            raise ValueError(
                f"Scenario {self.id} solution does not balance: "
                f"debits {self.total_debit} != credits {self.total_credit}"
            )
        return self

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit_amount for line in self.solution), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit_amount for line in self.solution), ZERO)

    @property
    def overview(self) -> Optional[str]:
        """The free-text 'overview' entry of the key calculations, if any."""
        return self.key_calculations.get("overview")

    @property
    def calculation_items(self) -> list[tuple[str, str]]:
        """Key calculations without the overview, in authored order."""
        return [
            (label, value)
            for label, value in self.key_calculations.items()
            if label != "overview"
        ]
