"""Rule table mapping the initial symptom triad to a canned analysis.

Rules are evaluated in order and the first match wins. Only the primary
symptom, severity and duration are inspected; recorded answers are not.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

DISCLAIMER = (
    "This analysis is for informational purposes only and should not replace "
    "professional medical advice."
)


@dataclass(frozen=True)
class SymptomTriad:
    primary: str
    severity: str
    duration: str


@dataclass(frozen=True)
class Outcome:
    condition: str
    probability: int
    description: str
    condition_severity: str
    recommendation_type: str
    action: str
    recommendation_description: str
    priority: int
    confidence: int

    def to_analysis(self) -> Dict[str, Any]:
        return {
            "possibleConditions": [
                {
                    "condition": self.condition,
                    "probability": self.probability,
                    "description": self.description,
                    "severity": self.condition_severity,
                }
            ],
            "recommendations": [
                {
                    "type": self.recommendation_type,
                    "action": self.action,
                    "description": self.recommendation_description,
                    "priority": self.priority,
                }
            ],
            "confidence": self.confidence,
            "disclaimer": DISCLAIMER,
        }


HIGH_FEVER = Outcome(
    condition="High Fever",
    probability=85,
    description="Severe fever requiring immediate attention",
    condition_severity="high",
    recommendation_type="immediate",
    action="Seek immediate medical attention",
    recommendation_description="High fever can be dangerous and requires prompt medical evaluation",
    priority=1,
    confidence=80,
)

PERSISTENT_COUGH = Outcome(
    condition="Persistent Cough",
    probability=70,
    description="Cough lasting more than a week may indicate underlying condition",
    condition_severity="moderate",
    recommendation_type="urgent",
    action="Consult a doctor within 24-48 hours",
    recommendation_description="Persistent cough should be evaluated by a healthcare professional",
    priority=2,
    confidence=75,
)

TENSION_HEADACHE = Outcome(
    condition="Tension Headache",
    probability=60,
    description="Common stress-related headache",
    condition_severity="low",
    recommendation_type="routine",
    action="Monitor symptoms and try stress reduction",
    recommendation_description="Consider over-the-counter pain relief and stress management",
    priority=3,
    confidence=65,
)

GENERAL_SYMPTOMS = Outcome(
    condition="General Symptoms",
    probability=50,
    description="Symptoms require further evaluation",
    condition_severity="moderate",
    recommendation_type="routine",
    action="Monitor symptoms and consult doctor if they worsen",
    recommendation_description="Keep track of symptoms and seek medical advice if needed",
    priority=4,
    confidence=50,
)

Rule = Tuple[Callable[[SymptomTriad], bool], Outcome]

RULES: List[Rule] = [
    (lambda t: t.primary == "fever" and t.severity == "severe", HIGH_FEVER),
    (lambda t: t.primary == "cough" and t.duration == "more_than_week", PERSISTENT_COUGH),
    (lambda t: t.primary == "headache" and t.severity == "mild", TENSION_HEADACHE),
]

FALLBACK = GENERAL_SYMPTOMS


def match(triad: SymptomTriad) -> Outcome:
    for predicate, outcome in RULES:
        if predicate(triad):
            return outcome
    return FALLBACK


def analyze(primary: str, severity: str, duration: str) -> Dict[str, Any]:
    return match(SymptomTriad(primary=primary, severity=severity, duration=duration)).to_analysis()


HIGH_RISK_SYMPTOMS = ("chest_pain", "shortness_of_breath", "severe_headache")
MODERATE_RISK_SYMPTOMS = ("fever", "abdominal_pain", "dizziness")


def risk_level(primary: str, severity: str) -> str:
    if primary in HIGH_RISK_SYMPTOMS and severity == "severe":
        return "high"
    if primary in MODERATE_RISK_SYMPTOMS or severity == "moderate":
        return "moderate"
    return "low"
