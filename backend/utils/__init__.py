from decimal import Decimal
import enum
from sqlalchemy.orm import class_mapper

def sqlalchemy_to_dict(obj):
    """Convert a SQLAlchemy object to a JSON-safe dictionary."""
    if not obj:
        return None
    mapper = class_mapper(obj.__class__)
    result = {}
    for c in mapper.columns:
        result[c.key] = to_json_value(getattr(obj, c.key))
    return result

def to_json_value(value):
    # Enums first: a str-based enum would otherwise pass through as a plain str
    if isinstance(value, enum.Enum):
        return value.value
    # Convert datetime/date objects to ISO format strings
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    # Decimals are kept exact as strings
    if isinstance(value, Decimal):
        return str(value)
    return value

__all__ = ['sqlalchemy_to_dict', 'to_json_value']
