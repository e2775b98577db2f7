"""폼 검증 규칙 — 브랜드/모델 필드 제약 조건.

Form validation rules — Declarative field constraints for brands and models.
The same rule table is applied by the request handlers and published at
``/api/validation-rules`` for the browser and the Python form controller,
so both sides check identical limits and report identical messages.
"""

import math
import re
from typing import Any, Literal

from pydantic import BaseModel, Field

# 대문자 시작 패턴 — Uppercase Latin initial, accented letters included.
# JS 정규식과 호환되는 형태로 유지 (kept compatible with JS RegExp syntax)
UPPERCASE_INITIAL: str = r"^[A-ZÀ-ÖØ-Þ]"

# ASCII 숫자만 — ASCII digits only, integers capped at 9 digits
_INT_RE = re.compile(r"^[+-]?[0-9]{1,9}$")
_FLOAT_RE = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)$")


class FieldRule(BaseModel):
    """단일 필드 검증 규칙.

    One field constraint. Length limits apply to the trimmed text; numeric
    limits are inclusive.
    """

    field: str
    label: str
    required: bool = True
    kind: Literal["text", "int", "float"] = "text"
    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    pattern: str | None = None
    default: Any = None
    messages: dict[str, str] = Field(default_factory=dict)


class RuleSet(BaseModel):
    """엔티티별 규칙 묶음 (Rules for one form)."""

    entity: Literal["brand", "model"]
    rules: list[FieldRule]


BRAND_RULES: RuleSet = RuleSet(
    entity="brand",
    rules=[
        FieldRule(
            field="name",
            label="Nombre",
            pattern=UPPERCASE_INITIAL,
            messages={
                "required": "El nombre es obligatorio.",
                "pattern": "El nombre debe comenzar por una letra mayúscula.",
            },
        ),
        FieldRule(
            field="country_origin",
            label="País de origen",
            min_length=2,
            messages={
                "required": "El país de origen es obligatorio.",
                "length": "El país de origen debe tener al menos 2 caracteres.",
            },
        ),
        FieldRule(
            field="founded_year",
            label="Año de fundación",
            kind="int",
            minimum=1900,
            maximum=2025,
            messages={
                "required": "El año de fundación es obligatorio.",
                "invalid": "El año de fundación debe ser un número.",
                "range": "El año de fundación debe estar entre 1900 y 2025.",
            },
        ),
        FieldRule(
            field="description",
            label="Descripción",
            min_length=20,
            max_length=300,
            messages={
                "required": "La descripción es obligatoria.",
                "length": "La descripción debe tener entre 20 y 300 caracteres.",
            },
        ),
    ],
)

MODEL_RULES: RuleSet = RuleSet(
    entity="model",
    rules=[
        FieldRule(
            field="name",
            label="Nombre",
            messages={"required": "El nombre del modelo es obligatorio."},
        ),
        FieldRule(
            field="category",
            label="Categoría",
            messages={"required": "La categoría es obligatoria."},
        ),
        FieldRule(
            field="description",
            label="Descripción",
            min_length=10,
            max_length=500,
            messages={
                "required": "La descripción es obligatoria.",
                "length": "La descripción debe tener entre 10 y 500 caracteres.",
            },
        ),
        FieldRule(
            field="release_year",
            label="Año de lanzamiento",
            kind="int",
            minimum=1970,
            maximum=2025,
            messages={
                "required": "El año de lanzamiento es obligatorio.",
                "invalid": "El año de lanzamiento debe ser un número.",
                "range": "El año de lanzamiento debe estar entre 1970 y 2025.",
            },
        ),
        FieldRule(
            field="price",
            label="Precio",
            kind="float",
            minimum=0,
            messages={
                "required": "El precio es obligatorio.",
                "invalid": "El precio debe ser un número positivo.",
                "range": "El precio debe ser un número positivo.",
            },
        ),
        FieldRule(
            field="average_rating",
            label="Valoración",
            required=False,
            kind="float",
            minimum=0,
            maximum=5,
            default=0,
            messages={
                "invalid": "La valoración debe estar entre 0 y 5.",
                "range": "La valoración debe estar entre 0 y 5.",
            },
        ),
        FieldRule(field="colorway", label="Colorway", required=False, default=""),
        FieldRule(field="size_range", label="Tallas", required=False, default=""),
    ],
)

RULE_SETS: dict[str, RuleSet] = {"brand": BRAND_RULES, "model": MODEL_RULES}


def _parse_number(rule: FieldRule, text: str) -> int | float | None:
    """숫자 필드를 엄격하게 파싱합니다 (Strict numeric parsing; None if invalid)."""
    if rule.kind == "int":
        return int(text) if _INT_RE.match(text) else None
    if not _FLOAT_RE.match(text):
        return None
    value: float = float(text)
    return value if math.isfinite(value) else None


def check_field(rule: FieldRule, raw: Any) -> tuple[Any, str | None]:
    """단일 필드를 검증합니다.

    Validate one raw form value against its rule.

    Args:
        rule: 필드 규칙 (Field rule)
        raw: 폼에서 받은 원본 값 (Raw submitted value, usually a string)

    Returns:
        tuple[Any, str | None]: (정규화된 값, 오류 메시지 또는 None)
            (Normalized value, error message or None)
    """
    text: str = "" if raw is None else str(raw).strip()

    if not text:
        if rule.required:
            return None, rule.messages.get("required", "Este campo es obligatorio.")
        return rule.default, None

    if rule.kind == "text":
        length: int = len(text)
        if (rule.min_length is not None and length < rule.min_length) or (
            rule.max_length is not None and length > rule.max_length
        ):
            return text, rule.messages["length"]
        if rule.pattern and not re.match(rule.pattern, text):
            return text, rule.messages["pattern"]
        return text, None

    value = _parse_number(rule, text)
    if value is None:
        return text, rule.messages["invalid"]
    if (rule.minimum is not None and value < rule.minimum) or (
        rule.maximum is not None and value > rule.maximum
    ):
        return value, rule.messages["range"]
    return value, None


def validate_form(
    rules: RuleSet,
    form: dict[str, Any],
) -> tuple[dict[str, Any], list[str]]:
    """폼 전체를 규칙 묶음으로 검증합니다.

    Validate every field of a submitted form.

    Returns:
        tuple[dict, list[str]]: (정규화된 값, 오류 메시지 목록)
            (Cleaned values keyed by field, error messages in field order)
    """
    cleaned: dict[str, Any] = {}
    errors: list[str] = []
    for rule in rules.rules:
        value, error = check_field(rule, form.get(rule.field))
        cleaned[rule.field] = value
        if error:
            errors.append(error)
    return cleaned, errors


def validate_brand(form: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    return validate_form(BRAND_RULES, form)


def validate_model(form: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    return validate_form(MODEL_RULES, form)
