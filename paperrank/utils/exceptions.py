"""Custom exceptions for the relevance engine

This module defines the exception hierarchy used inside the engine:
- Base exception for all engine errors
- Specific exceptions for input validation, reference data,
  configuration and AI reranking

All exceptions inherit from EngineError so callers inside the package can
catch every engine failure in a single except block. None of them cross the
public score/rerank boundary: the entry points convert them into result
fields.
"""


class EngineError(Exception):
    """Base exception for all engine errors

    Use this to catch any error raised by an engine component:
    ```python
    try:
        reference = load_reference_data(path)
    except EngineError as e:
        logger.error("engine_setup_failed", error=str(e))
    ```
    """

    pass


class ProfileValidationError(EngineError):
    """Profile or paper list failed validation

    Raised when:
    - Profile is missing or not a mapping
    - Paper list is missing or not a list
    - A field fails pydantic validation (bad tier, negative citations, ...)

    Nothing is scored when this is raised.
    """

    pass


class ReferenceDataError(EngineError):
    """Reference data could not be loaded

    Raised when:
    - A vocabulary or journal catalog file is missing
    - The YAML is invalid
    - An entry does not match the expected shape
    """

    pass


class ConfigValidationError(EngineError):
    """Engine configuration failed validation"""

    pass


class RerankError(EngineError):
    """AI reranking of a batch failed

    Raised when:
    - The provider call fails or times out
    - The response cannot be parsed into any score entry
    """

    pass


class JSONParseError(RerankError):
    """Failed to parse LLM JSON response

    Raised when:
    - LLM response contains no JSON array
    - The JSON is invalid
    - The top-level value is not an array
    """

    pass
