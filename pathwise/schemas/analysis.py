"""
Building blocks for AI-produced records.

Model output is untrusted: keys may be camelCase or snake_case, numbers may
arrive as strings, lists may arrive as scalars. Every field therefore has a
default, and `LenientModel.lenient()` drops whatever fails validation
instead of rejecting the whole record.
"""
import re
from typing import Annotated, Any, List, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, ValidationError
from pydantic.alias_generators import to_camel

T = TypeVar("T", bound="LenientModel")

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def _coerce_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    items = []
    for item in value:
        if isinstance(item, str):
            items.append(item)
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            items.append(str(item))
    return items


def _coerce_score(value: Any) -> float:
    """Accept 85, 85.0, "85", "85%" or "85/100"; clamp to 0-100."""
    if isinstance(value, bool):
        raise ValueError("score must be a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if not match:
            raise ValueError("score must be a number")
        number = float(match.group())
    else:
        raise ValueError("score must be a number")
    return max(0.0, min(100.0, number))


def _coerce_count(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("count must be a number")
    if isinstance(value, (int, float)):
        return max(0, value)
    if isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if match:
            return max(0.0, float(match.group()))
    raise ValueError("count must be a number")


StrList = Annotated[List[str], BeforeValidator(_coerce_str_list)]
Score = Annotated[float, BeforeValidator(_coerce_score)]
Count = Annotated[int, BeforeValidator(lambda v: int(_coerce_count(v)))]
Years = Annotated[float, BeforeValidator(_coerce_count)]


class LenientModel(BaseModel):
    """Base for records parsed out of model responses."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"

    @classmethod
    def lenient(cls: Type[T], value: Any) -> T:
        """Validate `value`, replacing any invalid field with its default."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, dict):
            return cls()
        try:
            return cls.model_validate(value)
        except ValidationError as e:
            bad = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
            cleaned = {
                key: item for key, item in value.items()
                if key not in bad and to_camel(key) not in bad
            }
            try:
                return cls.model_validate(cleaned)
            except ValidationError:
                return cls()

    @classmethod
    def lenient_list(cls: Type[T], value: Any) -> List[T]:
        """Validate a list of records, skipping entries that are not objects."""
        if not isinstance(value, list):
            return []
        records = []
        for item in value:
            if isinstance(item, dict):
                try:
                    records.append(cls.lenient(item))
                except ValidationError:
                    # a required field is missing altogether
                    continue
        return records

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
