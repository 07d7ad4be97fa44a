from typing import Any, Dict, Iterable


def apply_model_fields(model: Any, data: Dict[str, Any], allowed: Iterable[str]) -> None:
    """Copy allowlisted fields from a validated payload onto a SQLAlchemy model.

    Keys outside `allowed` are dropped, whatever the payload carries.
    """

    allowed = set(allowed)
    for key, value in data.items():
        if key in allowed and hasattr(model, key):
            setattr(model, key, value)
