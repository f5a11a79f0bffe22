from typing import Any, Dict, List, Type

from .models import SynthesisStep


def parse_step(value: Any, error_cls: Type[Exception] = ValueError) -> SynthesisStep:
    normalized = str(value or "").strip().lower()
    try:
        return SynthesisStep(normalized)
    except ValueError:
        raise error_cls(f"Unknown synthesis step: {value}")


def require_field(payload: Dict[str, Any], name: str, error_cls: Type[Exception] = ValueError) -> Any:
    value = (payload or {}).get(name)
    if value is None or value == "":
        raise error_cls(f"{name} is required.")
    return value


def parse_card_ids(payload: Dict[str, Any], error_cls: Type[Exception] = ValueError) -> List[str]:
    raw = require_field(payload, "card_ids", error_cls)
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise error_cls("card_ids must be a list.")
    return [str(card_id) for card_id in raw]
