import json
from typing import List

from app.agent.errors import MAX_REPORTED_ISSUES, ValidationIssue
from app.models.diagnostic import DiagnosticInput

OEM_REFERRAL_LINE = "Refer to OEM wiring diagram (OEM/Alldata/Mitchell) if available."
MIN_STEPS = 5

PLAN_STRUCTURE = """
{
  "version": "1.0",
  "language": "en" | "es",
  "vehicle": { "make": string, "model": string, "year": string, "engine": string, "vin": string, "mileage": string },
  "concern": { "dtcs": string[], "symptom": string, "notes": string },
  "overview": { "en": string, "es": string },
  "disclaimers": { "en": string, "es": string },
  "safetyNotes": { "en": string[], "es": string[] },
  "specs": {
    "labeledAsEstimated": boolean,
    "items": [
      { "name": { "en": string, "es": string }, "expectedRange": string, "unit": string, "note": { "en": string, "es": string }, "estimated": boolean }
    ]
  },
  "steps": [
    {
      "id": string,
      "title": { "en": string, "es": string },
      "purpose": { "en": string, "es": string },
      "procedure": { "en": string[], "es": string[] },
      "connectorHints": [
        {
          "label": { "en": string, "es": string },
          "test": { "en": string, "es": string },
          "expectedRange": string,
          "estimated": boolean,
          "notes": { "en": string, "es": string }
        }
      ],
      "passCriteria": { "en": string[], "es": string[] },
      "failCriteria": { "en": string[], "es": string[] },
      "nextOnPass": string | null,
      "nextOnFail": string | null
    }
  ],
  "firstStepId": string,
  "sessionId": string
}
""".strip()

PLAN_RULES = f"""
Rules:
- If VIN or mileage are unknown, set them to "" (empty string). Do NOT omit.
- Use estimated specs/ranges only; mark estimated=true and include "estimated" label in notes.
- NO OEM wiring diagrams. You may reference: "{OEM_REFERRAL_LINE}"
- Include bilingual text in both en and es ALWAYS, even if language is "en" or "es".
- Keep steps practical and safe. Include at least {MIN_STEPS} steps.
- Use stable step ids like "step-1", "step-2", etc.
- Set firstStepId to "step-1".
- nextOnPass / nextOnFail must be null or the id of another step in this plan.
- sessionId must echo the provided sessionId (or "" if none).
""".strip()


def case_facts(data: DiagnosticInput) -> dict:
    return {
        "make": data.make,
        "model": data.model,
        "year": data.year,
        "engine": data.engine,
        "dtcs": list(data.dtcs),
        "symptom": data.symptom,
        "notes": data.notes,
        "language": data.language,
        "sessionId": data.session_id,
        "vin": data.vin,
        "mileage": data.mileage,
    }


def build_diagnostic_prompt(data: DiagnosticInput) -> str:
    return (
        "You are generating a structured automotive diagnostic plan.\n\n"
        "Return ONLY valid JSON. No markdown. No backticks. No commentary.\n"
        "The JSON MUST be a single object matching this structure and include ALL required keys:\n\n"
        f"{PLAN_STRUCTURE}\n\n"
        f"{PLAN_RULES}\n\n"
        "Here is the case input:\n"
        f"{json.dumps(case_facts(data), indent=2, ensure_ascii=False)}"
    )


def build_repair_prompt(prompt: str, issues: List[ValidationIssue]) -> str:
    issue_lines = "\n".join(f"- {issue}" for issue in issues[:MAX_REPORTED_ISSUES])
    return (
        f"{prompt}\n\n"
        "Your previous JSON failed validation with these issues:\n"
        f"{issue_lines}\n\n"
        "Return ONLY corrected JSON that satisfies the structure exactly. "
        "Do not omit required keys."
    )
