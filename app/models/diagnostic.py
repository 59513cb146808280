# app/models/diagnostic.py

from collections import deque
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator  # type: ignore

Language = Literal["en", "es"]


class WireModel(BaseModel):
    # snake_case in Python, camelCase on the wire.
    # Model output must use the wire names only.
    pass


# --------------------------------------------------
# Shared bilingual helpers
# --------------------------------------------------

class BilingualText(WireModel):
    en: str
    es: str


class BilingualTextList(WireModel):
    en: List[str]
    es: List[str]


# --------------------------------------------------
# Input
# --------------------------------------------------

class DiagnosticInput(WireModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    make: str
    model: str
    year: str
    engine: str
    dtcs: List[str]
    symptom: str
    notes: str = ""
    language: Language = "en"
    session_id: str = Field(default="", alias="sessionId")
    vin: str = ""
    mileage: str = ""


# --------------------------------------------------
# Output / plan
# --------------------------------------------------

class Vehicle(WireModel):
    make: str
    model: str
    year: str
    engine: str
    vin: str
    mileage: str


class Concern(WireModel):
    dtcs: List[str]
    symptom: str
    notes: str


class SpecItem(WireModel):
    name: BilingualText
    expected_range: str = Field(alias="expectedRange")
    unit: str
    note: BilingualText
    estimated: StrictBool


class Specs(WireModel):
    labeled_as_estimated: StrictBool = Field(alias="labeledAsEstimated")
    items: List[SpecItem]


class ConnectorHint(WireModel):
    label: BilingualText
    test: BilingualText
    expected_range: str = Field(alias="expectedRange")
    estimated: StrictBool
    notes: BilingualText


class Step(WireModel):
    id: str
    title: BilingualText
    purpose: BilingualText
    procedure: BilingualTextList
    connector_hints: List[ConnectorHint] = Field(alias="connectorHints")
    pass_criteria: BilingualTextList = Field(alias="passCriteria")
    fail_criteria: BilingualTextList = Field(alias="failCriteria")
    # keys are required, values may be null
    next_on_pass: Optional[str] = Field(alias="nextOnPass")
    next_on_fail: Optional[str] = Field(alias="nextOnFail")


class DiagnosticPlan(WireModel):
    version: str
    language: Language
    vehicle: Vehicle
    concern: Concern
    overview: BilingualText
    disclaimers: BilingualText
    safety_notes: BilingualTextList = Field(alias="safetyNotes")
    specs: Specs
    steps: List[Step]
    first_step_id: str = Field(alias="firstStepId")
    session_id: str = Field(alias="sessionId")

    @model_validator(mode="after")
    def check_step_links(self) -> "DiagnosticPlan":
        """
        Every step reference must resolve to a step in this plan.
        Cycles and unreachable steps are allowed.
        """
        problems = []
        seen = set()

        for step in self.steps:
            if step.id in seen:
                problems.append(f"duplicate step id '{step.id}'")
            seen.add(step.id)

        if self.first_step_id not in seen:
            problems.append(f"firstStepId '{self.first_step_id}' does not match any step id")

        for step in self.steps:
            for key, target in (("nextOnPass", step.next_on_pass), ("nextOnFail", step.next_on_fail)):
                if target is not None and target not in seen:
                    problems.append(f"{step.id}.{key} '{target}' does not match any step id")

        if problems:
            raise ValueError("; ".join(problems))

        return self

    def get_step(self, step_id: str) -> Optional[Step]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def reachable_step_ids(self) -> List[str]:
        """
        Walk the pass/fail graph breadth-first from firstStepId.
        """
        order: List[str] = []
        queue = deque([self.first_step_id])

        while queue:
            step_id = queue.popleft()
            if step_id in order:
                continue

            step = self.get_step(step_id)
            if step is None:
                continue

            order.append(step_id)
            for target in (step.next_on_pass, step.next_on_fail):
                if target is not None and target not in order:
                    queue.append(target)

        return order

    def unreachable_step_ids(self) -> List[str]:
        reachable = set(self.reachable_step_ids())
        return [step.id for step in self.steps if step.id not in reachable]


# --------------------------------------------------
# Response envelopes
# --------------------------------------------------

class DiagnoseSuccess(BaseModel):
    ok: Literal[True] = True
    plan: DiagnosticPlan
    status_code: int = Field(default=200, exclude=True)

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True)


class DiagnoseFailure(BaseModel):
    ok: Literal[False] = False
    error: str
    detail: Optional[str] = None
    raw: Optional[str] = None
    status_code: int = Field(default=400, exclude=True)

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
