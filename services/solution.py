"""
Math Solver Editor - Solution Model
Structured step-by-step solution returned by the external solver.
"""

from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

Scalar = Union[int, float, str]

KNOWN_TYPES = ('equation', 'expression', 'derivative', 'integral')


class MathStep(BaseModel):
    """One step of the worked solution."""
    step: int
    description: str = ""
    expression: str = ""
    explanation: str = ""


class SolutionVerification(BaseModel):
    """Substitution check of one candidate solution."""
    model_config = ConfigDict(populate_by_name=True)

    solution: str
    left_side: Optional[str] = Field(None, alias="leftSide")
    right_side: Optional[str] = Field(None, alias="rightSide")
    is_correct: Optional[bool] = Field(None, alias="isCorrect")
    error: Optional[str] = None

    @field_validator('solution', mode='before')
    @classmethod
    def _stringify(cls, value):
        return value if isinstance(value, str) else str(value)


class FinalAnswer(BaseModel):
    """Tagged final answer: absent, a single scalar or a list of scalars."""
    kind: Literal['absent', 'scalar', 'list'] = 'absent'
    values: List[Scalar] = Field(default_factory=list)

    @classmethod
    def from_raw(cls, raw) -> 'FinalAnswer':
        if raw is None:
            return cls()
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, dict) and 'kind' in raw:
            return cls.model_validate(raw)
        if isinstance(raw, (list, tuple)):
            return cls(kind='list', values=list(raw))
        return cls(kind='scalar', values=[raw])

    def to_raw(self):
        """Wire form: null, a scalar or a list."""
        if self.kind == 'absent':
            return None
        if self.kind == 'list':
            return list(self.values)
        return self.values[0] if self.values else None


class Solution(BaseModel):
    """Complete solution as sent by the solver (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True)

    original_formula: str = Field("", alias="originalFormula")
    parsed_formula: str = Field("", alias="parsedFormula")
    steps: List[MathStep] = Field(default_factory=list)
    final_answer: FinalAnswer = Field(default_factory=FinalAnswer, alias="finalAnswer")
    verification: List[SolutionVerification] = Field(default_factory=list)
    explanation: str = ""
    type: str = "expression"

    @field_validator('final_answer', mode='before')
    @classmethod
    def _tag_final_answer(cls, value):
        return FinalAnswer.from_raw(value)

    @field_serializer('final_answer')
    def _untag_final_answer(self, answer: FinalAnswer):
        return answer.to_raw()

    @field_validator('verification', 'steps', mode='before')
    @classmethod
    def _null_to_empty(cls, value):
        return [] if value is None else value

    @property
    def solution_type(self) -> str:
        """Known type tag, or 'other'."""
        return self.type if self.type in KNOWN_TYPES else 'other'

    @property
    def verified(self) -> Optional[bool]:
        """True if every verification passed, None when nothing was checked."""
        if not self.verification:
            return None
        return all(v.is_correct is True and not v.error for v in self.verification)


def _format_scalar(value: Scalar) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_final_answer(answer: FinalAnswer) -> Optional[str]:
    """Display text for a final answer; None when there is none."""
    if answer.kind == 'absent':
        return None
    if answer.kind == 'list':
        return " or ".join(_format_scalar(v) for v in answer.values)
    return _format_scalar(answer.values[0]) if answer.values else None
