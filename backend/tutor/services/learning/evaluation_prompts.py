"""
Evaluation Prompts

LLM prompts used by the tutor's AI collaborators:
1. CodeEvaluator: judges free-form JavaScript for "coding" exercises
2. FeedbackGenerator: hints for wrong closed-form answers

Both prompts ask for structured JSON that is validated with Pydantic
before anything is persisted.
"""


# =============================================================================
# Shared fragments
# =============================================================================

TUTOR_SYSTEM_PROMPT = (
    "You are a patient, expert JavaScript tutor. "
    "You always answer with a single JSON object and nothing else."
)

CODE_LEVEL_DESCRIPTIONS = {
    "beginner": "beginner (be lenient with minor style issues; working logic matters most)",
    "intermediate": "intermediate (expect clean code and good JavaScript practices)",
}

FEEDBACK_LEVEL_DESCRIPTIONS = {
    "beginner": "beginner (simple, step-by-step explanations)",
    "intermediate": "intermediate (more technical but still clear explanations)",
}

CODE_ATTEMPT_CONTEXT = {
    1: "This is the first attempt. Be constructive and encouraging.",
    2: "This is the second attempt. Give more specific feedback.",
}
CODE_LAST_ATTEMPT_CONTEXT = (
    "This is the last attempt. Grade fairly but keep the feedback constructive."
)

FEEDBACK_FIRST_ATTEMPT_CONTEXT = (
    "This is the student's first attempt. Give subtle hints that guide "
    "without giving away too much."
)
FEEDBACK_LATER_ATTEMPT_CONTEXT = (
    "This is attempt {attempt_number}. Give more direct hints, but still do "
    "not reveal the full answer."
)


# =============================================================================
# Code Evaluation
# =============================================================================

CODE_EVALUATION_PROMPT = """Evaluate whether the student's JavaScript code meets the exercise requirements.

STUDENT LEVEL: {level_description}

EXERCISE:
{question}
{criteria_block}
STUDENT CODE:
```javascript
{code}
```

ATTEMPT: {attempt_number}/{max_attempts}
{attempt_context}

Instructions:
1. is_passing: true if the code works and achieves the goal of the exercise,
   even with minor syntax slips or imperfect style. false if it does not solve
   the problem, has critical logic errors, or cannot run. For beginners, lean
   towards passing working logic.
2. score (0-100):
   - 90-100: Excellent - correct, well structured, good practices
   - 70-89: Good - works, could improve style or efficiency
   - 50-69: Acceptable - meets the basics with minor problems
   - 30-49: Incomplete - partially correct logic, not functional
   - 0-29: Incorrect - does not meet the requirements
3. feedback: start with what is good, then explain what to improve. If the
   code passes, congratulate the student.
4. suggestions: 2-4 specific, actionable suggestions, most important first.
5. correctness_analysis: does the code work and meet every requirement?
6. code_quality: readability, JavaScript practices, efficiency, naming.

Return a JSON object with:
{{
    "is_passing": true,
    "score": 85,
    "feedback": "...",
    "suggestions": ["...", "..."],
    "correctness_analysis": "...",
    "code_quality": "..."
}}"""

CRITERIA_BLOCK = """
EVALUATION CRITERIA:
{criteria}
"""


# =============================================================================
# Feedback for Wrong Answers
# =============================================================================

EXERCISE_FEEDBACK_PROMPT = """A {level_description} student answered a JavaScript exercise incorrectly.

EXERCISE TYPE: {exercise_type}

QUESTION:
{question}

STUDENT ANSWER:
{user_answer}

CORRECT ANSWER (DO NOT REVEAL):
{correct_answer}

{attempt_context}
The student has at most {max_attempts} attempts. After the last one the correct answer is shown.

Instructions:
1. feedback: 2-4 encouraging sentences explaining what is wrong and which
   concept is misunderstood. NEVER state the correct answer.
2. hints: 2-3 progressive hints, general first, then more specific.
3. related_concepts: 2-4 JavaScript concepts to review, most important first.

Return a JSON object with:
{{
    "feedback": "...",
    "hints": ["...", "..."],
    "related_concepts": ["...", "..."]
}}"""
