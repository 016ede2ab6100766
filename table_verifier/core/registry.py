"""Schema type registry for looking up table schemas by name."""

from typing import TYPE_CHECKING, Dict, Type

if TYPE_CHECKING:
    from .schema import TableSchema

# Global registry mapping schema names to their classes
_SCHEMA_REGISTRY: Dict[str, Type["TableSchema"]] = {}


def register_schema(name: str):
    """
    Decorator to register a schema class in the registry.

    Args:
        name: Unique name for the schema (e.g., 'workunits')

    Returns:
        Decorator function

    Example:
        @register_schema("workunits")
        class WorkunitsSchema(TableSchema):
            ...
    """

    def decorator(cls: Type["TableSchema"]) -> Type["TableSchema"]:
        if name in _SCHEMA_REGISTRY:
            raise ValueError(
                f"Schema '{name}' is already registered to "
                f"{_SCHEMA_REGISTRY[name].__name__}"
            )
        _SCHEMA_REGISTRY[name] = cls
        cls._schema_type = name
        return cls

    return decorator


def get_schema_class(name: str) -> Type["TableSchema"]:
    """
    Get a schema class by its registered name.

    Raises:
        KeyError: If no schema is registered with that name
    """
    if name not in _SCHEMA_REGISTRY:
        available = sorted(_SCHEMA_REGISTRY)
        raise KeyError(
            f"No schema registered with name '{name}'. "
            f"Available schemas: {available}"
        )
    return _SCHEMA_REGISTRY[name]


def list_registered_schemas() -> Dict[str, Type["TableSchema"]]:
    """Get all registered schemas."""
    return _SCHEMA_REGISTRY.copy()


def is_registered(name: str) -> bool:
    return name in _SCHEMA_REGISTRY


def unregister_schema(name: str) -> None:
    """Remove a schema from the registry (useful for testing)."""
    _SCHEMA_REGISTRY.pop(name, None)
