import logging
from typing import Any, Optional, Union

from pydantic import ValidationError  # type: ignore

from app.agent.errors import (
    ConfigurationError,
    GenerationError,
    GenerationSchemaError,
    InputValidationError,
    issues_from_validation_error,
)
from app.agent.json_extract import parse_model_json
from app.agent.llm import GroqTextGenerator, TextGenerator
from app.agent.prompts.diagnostic_prompt import build_diagnostic_prompt, build_repair_prompt
from app.config import Settings
from app.models.diagnostic import (
    DiagnoseFailure,
    DiagnoseSuccess,
    DiagnosticInput,
    DiagnosticPlan,
)

logger = logging.getLogger(__name__)

# One initial attempt plus this many repair attempts, never more
MAX_REPAIR_ATTEMPTS = 1

MISSING_KEY_ERROR = "Missing GROQ_API_KEY in environment"
INVALID_INPUT_ERROR = "Invalid diagnostic request"
INVALID_PLAN_ERROR = "Model did not return valid JSON matching schema"
UNEXPECTED_ERROR = "Diagnose failed"

DiagnoseResponse = Union[DiagnoseSuccess, DiagnoseFailure]


class DiagnosticAgent:
    """
    Turns a diagnose request into a validated DiagnosticPlan.

    Flow per request:
    validate input -> prompt -> generate -> extract/validate
    -> (on failure) one repair prompt -> generate -> extract/validate

    Holds no per-request state, so one instance can serve concurrent requests.
    """

    def __init__(self, settings: Settings, generator: Optional[TextGenerator] = None):
        self.settings = settings
        # Without a key there is no client; diagnose() reports the missing key
        if generator is None and settings.groq_api_key:
            generator = GroqTextGenerator(settings)
        self.generator = generator

    # --------------------------------------------------
    # Public entry point
    # --------------------------------------------------

    def handle(self, payload: Any) -> DiagnoseResponse:
        try:
            plan = self.diagnose(payload)
            return DiagnoseSuccess(plan=plan)

        except ConfigurationError as e:
            logger.error("Diagnose rejected: %s", e)
            return DiagnoseFailure(error=str(e), status_code=e.status_code)

        except InputValidationError as e:
            logger.info("Invalid diagnose request: %s", e)
            return DiagnoseFailure(
                error=INVALID_INPUT_ERROR,
                detail=str(e),
                status_code=e.status_code,
            )

        except GenerationError as e:
            logger.error("Plan generation failed after repair: %s", e.summary)
            return DiagnoseFailure(
                error=INVALID_PLAN_ERROR,
                detail=e.summary,
                raw=e.raw,
                status_code=e.status_code,
            )

        except Exception as e:
            logger.exception("Unexpected diagnose failure")
            return DiagnoseFailure(error=UNEXPECTED_ERROR, detail=str(e), status_code=400)

    def diagnose(self, payload: Any) -> DiagnosticPlan:
        """
        Same as handle() but raises the typed errors instead of
        wrapping them in a failure response.
        """
        if not self.settings.groq_api_key:
            raise ConfigurationError(MISSING_KEY_ERROR)

        data = self.validate_input(payload)
        prompt = build_diagnostic_prompt(data)

        current_prompt = prompt
        last_error: Optional[GenerationError] = None

        for attempt in range(1, MAX_REPAIR_ATTEMPTS + 2):
            if last_error is not None:
                logger.info("Issuing repair attempt %d with %d issue(s)", attempt, len(last_error.issues))
                current_prompt = build_repair_prompt(prompt, last_error.issues)

            try:
                return self._attempt(current_prompt, attempt)
            except GenerationError as e:
                logger.warning("Attempt %d failed validation: %s", attempt, e.summary)
                last_error = e

        raise last_error

    # --------------------------------------------------
    # Steps
    # --------------------------------------------------

    @staticmethod
    def validate_input(payload: Any) -> DiagnosticInput:
        try:
            return DiagnosticInput.model_validate(payload)
        except ValidationError as e:
            raise InputValidationError(issues_from_validation_error(e)) from e

    def _attempt(self, prompt: str, attempt: int) -> DiagnosticPlan:
        logger.info("Generation attempt %d (model=%s)", attempt, self.settings.groq_model)
        raw = self.generator.generate(prompt)

        extraction = parse_model_json(raw)
        logger.debug("Attempt %d parsed via %s", attempt, extraction.strategy)

        try:
            plan = DiagnosticPlan.model_validate(extraction.data)
        except ValidationError as e:
            raise GenerationSchemaError(raw=raw, issues=issues_from_validation_error(e)) from e

        unreachable = plan.unreachable_step_ids()
        if unreachable:
            logger.warning("Plan has steps unreachable from %s: %s", plan.first_step_id, unreachable)

        return plan

