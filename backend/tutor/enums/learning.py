"""
Learning System Enums

Defines enums for exercise types, learner skill levels, topic progress
status and attempt rejection reasons.
"""

from enum import Enum


class ExerciseType(str, Enum):
    """
    Types of exercises attached to a lesson topic.

    Closed-form exercises (graded by the client against the stored answer):
    - MULTIPLE_CHOICE: Pick one option
    - CODE_COMPLETION: Fill in the missing piece of a snippet
    - DEBUGGING: Spot and fix the bug

    Open exercises (graded by the AI judge):
    - CODING: Write code from scratch against evaluation criteria
    """

    MULTIPLE_CHOICE = "multiple-choice"
    CODE_COMPLETION = "code-completion"
    DEBUGGING = "debugging"
    CODING = "coding"

    @property
    def is_ai_graded(self) -> bool:
        return self is ExerciseType.CODING


class SkillLevel(str, Enum):
    """
    Learner skill level, used to calibrate AI grading and feedback tone.
    """

    BEGINNER = "beginner"  # Lenient grading, focus on working logic
    INTERMEDIATE = "intermediate"  # Expects good practices and clean code


class ProgressStatus(str, Enum):
    """
    Topic progress status.

    Derived from the mean attempt score when a topic is marked complete:
    - MASTERED: score >= mastery threshold (90)
    - COMPLETED: score >= completion threshold (70)
    - IN_PROGRESS: anything lower
    NOT_STARTED is reserved for topics with no progress row.
    """

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    MASTERED = "mastered"


class RejectionReason(str, Enum):
    """Why a submission was refused without recording an attempt."""

    ALREADY_COMPLETED = "already_completed"  # A correct attempt exists
    MAX_ATTEMPTS_REACHED = "max_attempts_reached"  # Attempt cap exhausted
    CONCURRENT_SUBMISSION = "concurrent_submission"  # Lost an insert race
