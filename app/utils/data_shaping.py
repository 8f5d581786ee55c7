"""데이터 셰이핑 유틸리티 — fields 쿼리 파라미터로 응답 필드 선택.

Data shaping utility.
Reduces DTOs to the comma-separated list of fields requested by the client.
Field names are matched case-insensitively; unknown names are ignored and
an empty selection returns every field.
"""

from typing import Any, Iterable

from pydantic import BaseModel


def parse_fields(fields: str | None, available: Iterable[str]) -> list[str]:
    """요청된 필드 문자열을 유효한 필드 이름 목록으로 변환합니다.

    Resolve a "name,age" style string against the available field names.

    Args:
        fields: 쉼표로 구분된 필드 목록 (Comma-separated field list, may be None)
        available: DTO가 제공하는 필드 이름 (Field names exposed by the DTO)

    Returns:
        list[str]: DTO 선언 순서를 따르는 필드 목록 (Selected fields, in declaration order)
    """
    available_list: list[str] = list(available)
    if not fields or not fields.strip():
        return available_list

    requested: set[str] = {f.strip().lower() for f in fields.split(",") if f.strip()}
    return [name for name in available_list if name.lower() in requested]


def shape_data(
    entities: Iterable[BaseModel],
    fields: str | None,
) -> list[dict[str, Any]]:
    """DTO 목록을 선택된 필드만 담은 딕셔너리 목록으로 변환합니다.

    Shape a collection of DTOs down to the requested fields.
    """
    result: list[dict[str, Any]] = []
    selected: list[str] | None = None
    for entity in entities:
        if selected is None:
            selected = parse_fields(fields, type(entity).model_fields.keys())
        dumped: dict[str, Any] = entity.model_dump(mode="json")
        result.append({name: dumped[name] for name in selected})
    return result


def shape_entity(entity: BaseModel, fields: str | None) -> dict[str, Any]:
    """단일 DTO를 셰이핑합니다 (Shape a single DTO)."""
    return shape_data([entity], fields)[0]
