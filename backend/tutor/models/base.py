"""
Strict Base Models for API Request/Response Validation

This module provides base classes with strict validation settings to harden
the API contract between backend and frontend.

MOTIVATION:
    The tutor frontend speaks camelCase JSON while the service layer uses
    snake_case. The Camel* bases alias every field so both sides stay
    idiomatic, and strict request validation rejects typos up front.

Usage:
    # For request bodies (strictest validation)
    class TopicProgressRequest(CamelRequest):
        learning_path_id: str   # accepted as "learningPathId"

    # For response bodies (allows extra fields from DB)
    class TopicProgressRecord(CamelResponse):
        topic_id: str           # emitted as "topicId"

Architecture:
    API Request → CamelRequest (extra="forbid") → Route Handler
    DB Model → ServiceModel (from_attributes) → Service Layer
    Service Result → CamelResponse → API Response
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictRequest(BaseModel):
    """
    Base model for request bodies with strict validation.

    Features:
        - extra="forbid": Unknown fields are rejected
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings
        - from_attributes=True: Allows ORM model conversion
    """

    model_config = ConfigDict(
        extra="forbid",  # Reject unknown fields
        validate_default=True,  # Validate defaults
        str_strip_whitespace=True,  # Clean string inputs
        from_attributes=True,  # Enable ORM conversion
    )


class StrictResponse(BaseModel):
    """
    Base model for response bodies and validated LLM output.

    More lenient than StrictRequest: extra keys (e.g. fields a model adds
    to its JSON answer) are ignored.

    Example:
        >>> CodeEvaluation.model_validate(llm_json)
    """

    model_config = ConfigDict(
        extra="ignore",  # Allow extra fields in responses
        validate_default=True,  # Validate defaults
        from_attributes=True,  # Enable ORM conversion
    )


class ServiceModel(BaseModel):
    """
    Base model for data passed between routers, services and the store.

    Neither a request nor a response: commands, drafts and persistence
    records never cross the wire as-is. Strings are kept verbatim.
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,  # Enable ORM conversion
    )


class CamelRequest(StrictRequest):
    """StrictRequest that accepts camelCase keys (snake_case also allowed)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CamelResponse(StrictResponse):
    """StrictResponse serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
