from typing import Any, Dict, List, Optional

Question = Dict[str, Any]

QUESTION_SETS: Dict[str, List[Question]] = {
    "fever": [
        {
            "id": "fever_temp",
            "question": "What is your body temperature?",
            "type": "select",
            "options": ["Below 100°F (37.8°C)", "100-102°F (37.8-39°C)", "Above 102°F (39°C)", "Don't know"],
            "category": "general",
        },
        {
            "id": "fever_chills",
            "question": "Do you have chills or sweating?",
            "type": "radio",
            "options": ["Yes", "No"],
            "category": "general",
        },
    ],
    "cough": [
        {
            "id": "cough_type",
            "question": "What type of cough do you have?",
            "type": "select",
            "options": ["Dry cough", "Wet/productive cough", "Barking cough", "Whooping cough"],
            "category": "respiratory",
        },
        {
            "id": "cough_triggers",
            "question": "What triggers your cough?",
            "type": "checkbox",
            "options": ["Cold air", "Exercise", "Lying down", "Eating", "Nothing specific"],
            "category": "respiratory",
        },
    ],
    "headache": [
        {
            "id": "headache_location",
            "question": "Where is your headache located?",
            "type": "select",
            "options": ["Front of head", "Back of head", "One side", "All over", "Behind eyes"],
            "category": "neurological",
        },
        {
            "id": "headache_triggers",
            "question": "What triggers your headache?",
            "type": "checkbox",
            "options": ["Stress", "Lack of sleep", "Bright lights", "Loud noises", "Certain foods"],
            "category": "neurological",
        },
    ],
}

DEFAULT_QUESTIONS: List[Question] = [
    {
        "id": "general_health",
        "question": "How would you rate your overall health?",
        "type": "select",
        "options": ["Excellent", "Good", "Fair", "Poor"],
        "category": "general",
    },
    {
        "id": "medications",
        "question": "Are you currently taking any medications?",
        "type": "radio",
        "options": ["Yes", "No"],
        "category": "general",
    },
]


def questions_for(primary_symptom: str) -> List[Question]:
    return QUESTION_SETS.get(primary_symptom, []) + DEFAULT_QUESTIONS


def next_question(primary_symptom: str, question_number: int) -> Optional[Question]:
    """1-based lookup into the symptom questions followed by the generic ones."""
    questions = questions_for(primary_symptom)
    if question_number < 1 or question_number > len(questions):
        return None
    return dict(questions[question_number - 1])
