from __future__ import annotations

import pytest

from checklist_engine.document import codec
from checklist_engine.document.hierarchy import child_count, visible_indices
from checklist_engine.document.model import (
    Checklist,
    ChecklistFile,
    FileMetadata,
    Group,
    GroupCategory,
    Item,
    ItemKind,
    SourceFormat,
)
from checklist_engine.document.validation import (
    DocumentValidationError,
    ensure_valid,
    find_problems,
)


def make_file() -> ChecklistFile:
    items = (
        Item(id="t", kind=ItemKind.TITLE, challenge_text="ENGINE START", centered=True),
        Item(id="m", challenge_text="Mixture", response_text="RICH", depth=1),
        Item(id="n", kind=ItemKind.NOTE, challenge_text="Prime if cold", depth=2),
        Item(id="i", challenge_text="Ignition", response_text="START", depth=1),
        Item(id="w", kind=ItemKind.WARNING, challenge_text="Props clear", collapsible=True),
    )
    return ChecklistFile(
        id="f",
        name="Skyhawk",
        format=SourceFormat.ACE,
        groups=(
            Group(
                id="g",
                name="Normal",
                category=GroupCategory.EMERGENCY,
                checklists=(Checklist(id="c", name="Start", items=items),),
            ),
        ),
        metadata=FileMetadata(aircraft_registration="N12345", make_model="C172"),
        file_path="/tmp/skyhawk.json",
        dirty=True,
        last_modified=42.5,
    )


def test_round_trip_preserves_document_and_hierarchy() -> None:
    original = make_file()

    loaded = codec.loads(codec.dumps(original))

    assert loaded == original
    before = original.groups[0].checklists[0].items
    after = loaded.groups[0].checklists[0].items
    for index in range(len(before)):
        assert child_count(after, index) == child_count(before, index)
    assert visible_indices(after, {"t"}) == visible_indices(before, {"t"})


def test_runtime_fields_are_optional() -> None:
    data = codec.file_to_dict(make_file(), include_runtime=False)

    assert "filePath" not in data and "dirty" not in data
    loaded = codec.file_from_dict(data)
    assert loaded.file_path is None
    assert loaded.dirty is False
    assert data["groups"][0]["checklists"][0]["items"][1]["indent"] == 1


def test_lenient_decoding_fills_defaults() -> None:
    data = {
        "groups": [
            {
                "category": "bogus",
                "checklists": [
                    {
                        "items": [
                            {"type": "banner", "challengeText": "x", "indent": 7},
                            {"indent": -2},
                            {"indent": "deep"},
                        ]
                    }
                ],
            }
        ],
    }

    loaded = codec.file_from_dict(data, default_name="imported")

    assert loaded.name == "imported"
    assert loaded.format is SourceFormat.JSON
    group = loaded.groups[0]
    assert group.category is GroupCategory.NORMAL
    items = group.checklists[0].items
    assert [item.depth for item in items] == [3, 0, 0]
    assert items[0].kind is ItemKind.CHALLENGE_RESPONSE
    assert len({item.id for item in items}) == 3
    assert find_problems(loaded) == ()


def test_lenient_decoding_ignores_bad_timestamp() -> None:
    loaded = codec.file_from_dict({"id": "f", "lastModified": "yesterday"})
    stamped = codec.file_from_dict({"id": "f", "lastModified": "12.5"})

    assert loaded.last_modified == 0.0
    assert stamped.last_modified == 12.5


def test_duplicate_ids_fail_validation() -> None:
    item = Item(id="dup")
    checklist_file = ChecklistFile(
        id="f",
        groups=(
            Group(
                id="g",
                checklists=(
                    Checklist(id="c1", items=(item,)),
                    Checklist(id="c2", items=(item,)),
                ),
            ),
        ),
    )

    with pytest.raises(DocumentValidationError) as excinfo:
        ensure_valid(checklist_file)

    assert any("dup" in problem for problem in excinfo.value.problems)


def test_item_rejects_out_of_range_depth() -> None:
    with pytest.raises(ValueError):
        Item(id="x", depth=4)
