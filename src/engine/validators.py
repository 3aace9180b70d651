"""
Balloon Rush - Input Validation Utilities

Provides validation functions for round engine inputs. All validators
either return validated data or raise descriptive ValueError exceptions.
"""

MIN_PARTICIPANTS = 1
MAX_PARTICIPANTS = 2


def validate_elapsed(elapsed_ms: float) -> float:
    """
    Validate an elapsed round time.

    Args:
        elapsed_ms: Milliseconds since the round started

    Returns:
        Validated elapsed time as a float

    Raises:
        ValueError: If elapsed time is not a non-negative number
    """
    if isinstance(elapsed_ms, bool) or not isinstance(elapsed_ms, (int, float)):
        raise ValueError(
            f"Elapsed time must be a number, got {type(elapsed_ms).__name__}."
        )

    if elapsed_ms < 0:
        raise ValueError(f"Elapsed time cannot be negative, got {elapsed_ms}.")

    return float(elapsed_ms)


def validate_tick_delta(dt_ms: float) -> float:
    """
    Validate the duration of a single tick.

    Raises:
        ValueError: If the delta is not a non-negative number
    """
    if isinstance(dt_ms, bool) or not isinstance(dt_ms, (int, float)):
        raise ValueError(f"Tick delta must be a number, got {type(dt_ms).__name__}.")

    if dt_ms < 0:
        raise ValueError(f"Tick delta cannot be negative, got {dt_ms}.")

    return float(dt_ms)


def validate_probability(value: float, name: str = "Probability") -> float:
    """
    Validate a probability value.

    Args:
        value: Value to validate
        name: Label used in the error message

    Returns:
        Validated probability

    Raises:
        ValueError: If value is outside [0, 1]
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {type(value).__name__}.")

    if not (0.0 <= value <= 1.0):
        raise ValueError(f"{name} must be between 0 and 1, got {value}.")

    return float(value)


def validate_positive(value: float, name: str, allow_zero: bool = False) -> float:
    """
    Validate a positive numeric constant.

    Raises:
        ValueError: If value is negative (or zero when not allowed)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {type(value).__name__}.")

    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise ValueError(f"{name} must be {bound}, got {value}.")

    return float(value)


def validate_participant_count(count: int) -> int:
    """
    Validate number of participants.

    Args:
        count: Number of balloons in a round

    Returns:
        Validated count

    Raises:
        ValueError: If count is not 1-2
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValueError(f"Participant count must be an integer, got {type(count).__name__}.")

    if not (MIN_PARTICIPANTS <= count <= MAX_PARTICIPANTS):
        raise ValueError(
            f"Participant count must be {MIN_PARTICIPANTS}-{MAX_PARTICIPANTS}, got {count}."
        )

    return count
