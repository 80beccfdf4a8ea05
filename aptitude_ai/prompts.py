# aptitude_ai/prompts.py

from typing import Iterable, List, Optional, Sequence

STUDY_LEVELS = ("school", "college")

SCHOOL_STANDARDS = ["8th", "9th", "10th", "11th", "12th"]
COLLEGE_YEARS = ["1st Year", "2nd Year", "3rd Year", "4th Year"]

MAX_SKILLS = 20
DEFAULT_SKILLS = ["General Knowledge", "Problem Solving", "Analytical Thinking"]

SYSTEM_PROMPT = "You are an expert aptitude test writer. You answer with valid JSON only."


# ============ TOPIC BUILDERS ============
def subject_topic(
    study_level: str,
    standard: str,
    subject: str,
    course: Optional[str] = None,
) -> str:
    """
    Topic for a subject-based test.
    school  -> "School student, Standard: 10th, Subject/Topic: Algebra"
    college -> "College student, Year: 2nd Year, Course: MBA, Subject/Topic: Finance"
    """
    level = (study_level or "").strip().lower()
    if level not in STUDY_LEVELS:
        raise ValueError(f"study_level must be one of {STUDY_LEVELS}, got {study_level!r}")
    if not (standard or "").strip() or not (subject or "").strip():
        raise ValueError("Missing information: standard and subject are required")
    if level == "college" and not (course or "").strip():
        raise ValueError("Missing information: course is required for college students")

    subject = subject.strip()
    standard = standard.strip()
    if level == "school":
        return f"School student, Standard: {standard}, Subject/Topic: {subject}"
    return f"College student, Year: {standard}, Course: {course.strip()}, Subject/Topic: {subject}"


def clean_skills(skills: Iterable[str]) -> List[str]:
    """Strip, drop empties/duplicates, keep at most MAX_SKILLS."""
    out: List[str] = []
    seen = set()
    for s in skills or []:
        if not isinstance(s, str):
            continue
        s = s.strip()
        if s and s.lower() not in seen:
            out.append(s)
            seen.add(s.lower())
        if len(out) >= MAX_SKILLS:
            break
    return out


def skills_topic(skills: Iterable[str]) -> str:
    """Topic for a resume-based test, built from the extracted skill list."""
    cleaned = clean_skills(skills) or list(DEFAULT_SKILLS)
    return "Skills and domains: " + ", ".join(cleaned)


# ============ GENERATION PROMPT ============
def make_prompt(topic: str, difficulty_mix: Sequence[str]) -> str:
    n = len(difficulty_mix)
    slots = "\n".join(f"{i}. {d}" for i, d in enumerate(difficulty_mix, 1))
    return f"""
Generate exactly {n} multiple-choice question{"s" if n != 1 else ""} to assess this test-taker.

Topic: {topic}

IMPORTANT: Questions must be strictly about the topic above and appropriate for the stated level.
Each question must match the difficulty of its slot, in this order:
{slots}

Each question has exactly 4 options and ONE correct option.

Format as JSON array:
[
  {{
    "question": "Question text here?",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctAnswer": 0,
    "difficulty": "easy"
  }}
]

correctAnswer is the index (0-3) of the correct option.
Return ONLY valid JSON, no other text.
""".strip()
