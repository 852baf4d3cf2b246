from typing import Any, TypeVar

T = TypeVar("T")


def apply_dict_updates(entity: T, update_data: dict[str, Any], excluded_attrs: set[str] | None) -> set[str]:
    """
    Dynamically applies key-value pairs from a dictionary to an ORM entity.

    Args:
        entity: The SQLAlchemy ORM object loaded into the session.
        update_data: Dictionary of fields and values to update.
        excluded_attrs: Attribute names to explicitly ignore/skip updating.

    Returns:
        The names of the attributes whose value actually changed. Assigning an
        attribute its current value is not counted.
    """
    excluded_attrs = excluded_attrs if excluded_attrs else set()
    changed: set[str] = set()
    for key, value in update_data.items():

        if key in excluded_attrs:
            continue

        if hasattr(entity, key) and getattr(entity, key) != value:
            setattr(entity, key, value)
            changed.add(key)

    return changed
