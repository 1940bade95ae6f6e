from enum import Enum


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer-not-to-say"


class BloodGroup(str, Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class Symptom(str, Enum):
    FEVER = "fever"
    COUGH = "cough"
    HEADACHE = "headache"
    FATIGUE = "fatigue"
    NAUSEA = "nausea"
    DIZZINESS = "dizziness"
    CHEST_PAIN = "chest_pain"
    ABDOMINAL_PAIN = "abdominal_pain"
    JOINT_PAIN = "joint_pain"
    SKIN_RASH = "skin_rash"
    SHORTNESS_OF_BREATH = "shortness_of_breath"
    LOSS_OF_APPETITE = "loss_of_appetite"
    INSOMNIA = "insomnia"
    ANXIETY = "anxiety"


class Severity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class Duration(str, Enum):
    LESS_THAN_24H = "less_than_24h"
    ONE_TO_THREE_DAYS = "1_3_days"
    THREE_TO_SEVEN_DAYS = "3_7_days"
    MORE_THAN_WEEK = "more_than_week"


class QuizStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REVIEWED_BY_DOCTOR = "reviewed_by_doctor"


class QuestionCategory(str, Enum):
    GENERAL = "general"
    RESPIRATORY = "respiratory"
    CARDIOVASCULAR = "cardiovascular"
    GASTROINTESTINAL = "gastrointestinal"
    NEUROLOGICAL = "neurological"
    DERMATOLOGICAL = "dermatological"


class ContactStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class ContactPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ContactCategory(str, Enum):
    GENERAL = "general"
    TECHNICAL = "technical"
    SUPPORT = "support"
    FEEDBACK = "feedback"
    PARTNERSHIP = "partnership"
    OTHER = "other"
