"""Plain-value codec for handing files to and from the format layer.

``file_to_dict`` produces JSON-ready dictionaries in the editor's native
layout (camelCase keys, ``indent`` for depth); ``file_from_dict`` reads the
same layout back. Ids are written out and restored, so collapse sets keyed by
item id resolve identically after a round trip.

Decoding is lenient in the way import readers have to be: missing fields
take defaults, missing ids are generated, depths are clamped into
``[0, 3]`` and unknown kinds fall back to challenge/response.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping

from .model import (
    MAX_DEPTH,
    MIN_DEPTH,
    Checklist,
    ChecklistFile,
    FileMetadata,
    Group,
    GroupCategory,
    Item,
    ItemKind,
    SourceFormat,
    new_id,
)


def item_to_dict(item: Item) -> Dict[str, Any]:
    return {
        "id": item.id,
        "type": item.kind.value,
        "challengeText": item.challenge_text,
        "responseText": item.response_text,
        "indent": item.depth,
        "centered": item.centered,
        "collapsible": item.collapsible,
    }


def file_to_dict(checklist_file: ChecklistFile, *, include_runtime: bool = True) -> Dict[str, Any]:
    """Serialize a file; ``include_runtime`` adds path, dirty and mtime."""

    data: Dict[str, Any] = {
        "id": checklist_file.id,
        "name": checklist_file.name,
        "format": checklist_file.format.value,
        "groups": [
            {
                "id": group.id,
                "name": group.name,
                "category": group.category.value,
                "checklists": [
                    {
                        "id": checklist.id,
                        "name": checklist.name,
                        "items": [item_to_dict(item) for item in checklist.items],
                    }
                    for checklist in group.checklists
                ],
            }
            for group in checklist_file.groups
        ],
        "metadata": {
            "aircraftRegistration": checklist_file.metadata.aircraft_registration,
            "makeModel": checklist_file.metadata.make_model,
            "copyright": checklist_file.metadata.copyright,
        },
    }
    if include_runtime:
        data["filePath"] = checklist_file.file_path
        data["dirty"] = checklist_file.dirty
        data["lastModified"] = checklist_file.last_modified
    return data


def _clamp_depth(raw: Any) -> int:
    try:
        depth = int(raw)
    except (TypeError, ValueError):
        return MIN_DEPTH
    return max(MIN_DEPTH, min(depth, MAX_DEPTH))


def _timestamp(raw: Any) -> float:
    try:
        return float(raw or 0.0)
    except (TypeError, ValueError):
        return 0.0


def _enum_or(enum_cls: Any, raw: Any, fallback: Any) -> Any:
    try:
        return enum_cls(raw)
    except ValueError:
        return fallback


def item_from_dict(data: Mapping[str, Any]) -> Item:
    return Item(
        id=str(data.get("id") or new_id()),
        kind=_enum_or(ItemKind, data.get("type"), ItemKind.CHALLENGE_RESPONSE),
        challenge_text=str(data.get("challengeText") or ""),
        response_text=str(data.get("responseText") or ""),
        depth=_clamp_depth(data.get("indent", MIN_DEPTH)),
        centered=bool(data.get("centered", False)),
        collapsible=bool(data.get("collapsible", False)),
    )


def file_from_dict(data: Mapping[str, Any], *, default_name: str = "") -> ChecklistFile:
    metadata = data.get("metadata") or {}
    groups = []
    for raw_group in data.get("groups") or ():
        checklists = [
            Checklist(
                id=str(raw_checklist.get("id") or new_id()),
                name=str(raw_checklist.get("name") or ""),
                items=tuple(item_from_dict(raw) for raw in raw_checklist.get("items") or ()),
            )
            for raw_checklist in raw_group.get("checklists") or ()
        ]
        groups.append(
            Group(
                id=str(raw_group.get("id") or new_id()),
                name=str(raw_group.get("name") or ""),
                category=_enum_or(
                    GroupCategory, raw_group.get("category"), GroupCategory.NORMAL
                ),
                checklists=tuple(checklists),
            )
        )

    return ChecklistFile(
        id=str(data.get("id") or new_id()),
        name=str(data.get("name") or default_name),
        format=_enum_or(SourceFormat, data.get("format"), SourceFormat.JSON),
        groups=tuple(groups),
        metadata=FileMetadata(
            aircraft_registration=str(metadata.get("aircraftRegistration") or ""),
            make_model=str(metadata.get("makeModel") or ""),
            copyright=str(metadata.get("copyright") or ""),
        ),
        file_path=data.get("filePath"),
        dirty=bool(data.get("dirty", False)),
        last_modified=_timestamp(data.get("lastModified")),
    )


def dumps(checklist_file: ChecklistFile, *, include_runtime: bool = True) -> str:
    return json.dumps(file_to_dict(checklist_file, include_runtime=include_runtime), indent=2)


def loads(text: str, *, default_name: str = "") -> ChecklistFile:
    return file_from_dict(json.loads(text), default_name=default_name)


__all__ = [
    "item_to_dict",
    "item_from_dict",
    "file_to_dict",
    "file_from_dict",
    "dumps",
    "loads",
]
