"""콘텐츠 협상 유틸리티 — Accept 헤더에 따른 JSON/XML/CSV 응답 생성.

Content negotiation utility.
Routers hand JSON-compatible payloads (dicts or lists of dicts) to
negotiate(), which renders them in the media type the client asked for:

    application/json (default, */*, missing header)
    application/xml, text/xml  (lxml)
    text/csv                   (header row + one row per item)

Any other Accept value yields 406 Not Acceptable.
"""

import csv
import io
import json
import re
from typing import Any, Callable

from fastapi import Request
from fastapi.responses import Response
from lxml import etree

from app.utils.exceptions import NotAcceptableError

JSON_MEDIA_TYPE: str = "application/json"
XML_MEDIA_TYPE: str = "application/xml"
CSV_MEDIA_TYPE: str = "text/csv"

# Accept 값 → 렌더링할 미디어 타입 (Accepted value → produced media type)
_MEDIA_TYPE_MAP: dict[str, str] = {
    "*/*": JSON_MEDIA_TYPE,
    "application/*": JSON_MEDIA_TYPE,
    "application/json": JSON_MEDIA_TYPE,
    "application/xml": XML_MEDIA_TYPE,
    "text/xml": XML_MEDIA_TYPE,
    "text/csv": CSV_MEDIA_TYPE,
    "text/*": CSV_MEDIA_TYPE,
}

# XML 1.0에서 허용되지 않는 문자 (Characters XML 1.0 documents cannot carry)
_XML_INVALID_CHARS: re.Pattern[str] = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


def _parse_accept(accept: str) -> list[str]:
    """Accept 헤더를 q값 내림차순 미디어 타입 목록으로 변환합니다."""
    weighted: list[tuple[float, int, str]] = []
    for index, part in enumerate(accept.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        media_type = pieces[0].lower()
        if not media_type:
            continue
        quality = 1.0
        for param in pieces[1:]:
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 0.0
        if quality > 0:
            weighted.append((-quality, index, media_type))
    return [media_type for _, _, media_type in sorted(weighted)]


def select_media_type(request: Request) -> str:
    """요청의 Accept 헤더로 응답 미디어 타입을 결정합니다.

    Pick the output media type for the request.

    Raises:
        NotAcceptableError: 지원 가능한 타입이 없을 때 (No supported media type requested)
    """
    accept: str = request.headers.get("accept", "").strip()
    if not accept:
        return JSON_MEDIA_TYPE
    for media_type in _parse_accept(accept):
        if media_type in _MEDIA_TYPE_MAP:
            return _MEDIA_TYPE_MAP[media_type]
    raise NotAcceptableError(f"Media type '{accept}' is not supported")


def _xml_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return _XML_INVALID_CHARS.sub("", str(value))


def _append_xml(parent: etree._Element, tag: str, value: Any) -> None:
    element = etree.SubElement(parent, tag)
    if isinstance(value, dict):
        for key, child in value.items():
            _append_xml(element, key, child)
    elif isinstance(value, list):
        for child in value:
            _append_xml(element, "item", child)
    else:
        element.text = _xml_text(value)


def render_xml(content: Any, root_tag: str, item_tag: str) -> bytes:
    """페이로드를 XML 문서로 렌더링합니다 (Render a payload as an XML document)."""
    if isinstance(content, list):
        root = etree.Element(root_tag)
        for item in content:
            _append_xml(root, item_tag, item)
    else:
        root = etree.Element(item_tag)
        for key, value in (content or {}).items():
            _append_xml(root, key, value)
    return etree.tostring(root, xml_declaration=True, encoding="utf-8")


def render_csv(content: Any) -> bytes:
    """페이로드를 CSV로 렌더링합니다. 첫 행은 필드 이름입니다.

    Render a payload as CSV; the first row holds the field names.
    """
    rows: list[dict[str, Any]] = content if isinstance(content, list) else [content or {}]
    buffer = io.StringIO()
    if rows:
        writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()), lineterminator="\n")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return buffer.getvalue().encode("utf-8")


_RENDERERS: dict[str, Callable[..., bytes]] = {
    JSON_MEDIA_TYPE: lambda content, **_: json.dumps(content, ensure_ascii=False).encode("utf-8"),
    XML_MEDIA_TYPE: lambda content, root_tag, item_tag: render_xml(content, root_tag, item_tag),
    CSV_MEDIA_TYPE: lambda content, **_: render_csv(content),
}


def negotiate(
    request: Request,
    content: Any,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
    root_tag: str = "items",
    item_tag: str = "item",
) -> Response:
    """Accept 헤더에 맞는 형식으로 응답을 생성합니다.

    Build a Response rendering content in the negotiated media type.

    Args:
        request: 현재 요청 (Current request, for the Accept header)
        content: JSON 호환 페이로드 (JSON-compatible dict or list of dicts)
        status_code: 응답 상태 코드 (Response status code)
        headers: 추가 응답 헤더 (Extra response headers, e.g. Location)
        root_tag: XML 목록 루트 태그 (XML root tag for lists)
        item_tag: XML 항목 태그 (XML tag for each item / single object)

    Returns:
        Response: 렌더링된 응답 (Rendered response)

    Raises:
        NotAcceptableError: 지원하지 않는 Accept (Unsupported Accept header)
    """
    media_type: str = select_media_type(request)
    body: bytes = _RENDERERS[media_type](content, root_tag=root_tag, item_tag=item_tag)
    return Response(content=body, status_code=status_code, headers=headers, media_type=media_type)
