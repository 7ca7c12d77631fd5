"""Group-level behaviour of the nested and flat format drivers."""

from __future__ import annotations

import functools
import io
import logging
import xml.etree.ElementTree as ET

import pytest

from scenexml import (
    NIL_UUID,
    LazyUserNameService,
    PrimFlags,
    SceneObjectDecodeError,
    SceneObjectGroup,
    SceneObjectPart,
    from_original_xml,
    from_xml2,
    part_from_xml2,
    serialize_script_states,
    to_original_xml,
    to_original_xml_with_state,
    to_xml2,
    write_original_xml,
    write_xml2,
)
from scenexml.faults import PART
from scenexml.serializer import load_script_states

from conftest import CREATOR, OWNER, SCRIPT_ITEM


def test_original_round_trip(linked_group: SceneObjectGroup) -> None:
    result = from_original_xml(to_original_xml(linked_group))

    assert result.ok
    assert result.faults == ()
    assert result.group == linked_group


def test_xml2_round_trip(linked_group: SceneObjectGroup) -> None:
    result = from_xml2(to_xml2(linked_group, include_script_states=True))

    assert result.faults == ()
    assert result.group == linked_group


def test_xml2_omits_script_states_by_default(linked_group: SceneObjectGroup) -> None:
    markup = to_xml2(linked_group)
    result = from_xml2(markup)

    assert "GroupScriptStates" not in markup
    assert result.group.script_states == {}
    assert result.group.parts == linked_group.parts


def test_original_layout(linked_group: SceneObjectGroup) -> None:
    document = ET.fromstring(to_original_xml(linked_group))

    assert document.tag == "SceneObjectGroup"
    assert [child.tag for child in document] == ["RootPart", "OtherParts", "GroupScriptStates"]
    assert document.find("RootPart/SceneObjectPart/Name").text == "Root"
    names = [element.text for element in document.findall("OtherParts/Part/SceneObjectPart/Name")]
    assert names == ["Left arm", "Right arm"]
    state = document.find("GroupScriptStates/SavedScriptState")
    assert state.get("UUID") == str(SCRIPT_ITEM)


def test_original_without_script_states(linked_group: SceneObjectGroup) -> None:
    markup = to_original_xml(linked_group, include_script_states=False)
    assert "GroupScriptStates" not in markup
    assert from_original_xml(markup).group.script_states == {}


def test_writers_accept_text_sinks(linked_group: SceneObjectGroup) -> None:
    original = io.StringIO()
    flat = io.StringIO()
    write_original_xml(linked_group, original)
    write_xml2(linked_group, flat)

    assert original.getvalue() == to_original_xml(linked_group)
    assert flat.getvalue() == to_xml2(linked_group)


def test_readers_accept_bytes_and_streams(linked_group: SceneObjectGroup) -> None:
    markup = to_original_xml(linked_group)

    assert from_original_xml(markup.encode("utf-8")).group == linked_group
    assert from_original_xml(io.StringIO(markup)).group == linked_group


def test_external_script_state_blob_is_inserted_verbatim(linked_group: SceneObjectGroup) -> None:
    blob = '<GroupScriptStates><SavedScriptState UUID="%s"><Captured>later</Captured></SavedScriptState></GroupScriptStates>' % SCRIPT_ITEM

    markup = to_original_xml_with_state(linked_group, blob)

    assert markup.endswith(blob + "</SceneObjectGroup>")
    assert markup.count("GroupScriptStates") == 2
    restored = from_original_xml(markup).unwrap()
    assert restored.script_states == {SCRIPT_ITEM: "<Captured>later</Captured>"}


def test_captured_script_states_can_be_reused(linked_group: SceneObjectGroup) -> None:
    captured = serialize_script_states(linked_group)
    markup = to_original_xml_with_state(linked_group, captured)

    assert markup == to_original_xml(linked_group)


def test_missing_root_part_is_a_structural_failure(caplog) -> None:
    markup = "<SceneObjectGroup><OtherParts /></SceneObjectGroup>"

    with caplog.at_level(logging.ERROR, logger="scenexml.serializer"):
        result = from_original_xml(markup)

    assert result.group is None
    assert not result.ok
    assert "no root part" in result.error.message
    assert result.error.snapshot == markup
    assert "no root part" in caplog.text
    with pytest.raises(SceneObjectDecodeError):
        result.unwrap()


def test_xml2_without_parts_is_a_structural_failure() -> None:
    result = from_xml2("<SceneObjectGroup><OtherParts /></SceneObjectGroup>")
    assert result.group is None
    assert "no SceneObjectPart" in result.error.message


def test_malformed_document_is_a_structural_failure() -> None:
    result = from_original_xml("<SceneObjectGroup><RootPart>")
    assert result.group is None
    assert result.error.message.startswith("Invalid Xml format")


def test_empty_part_wrapper_is_a_structural_failure(linked_group: SceneObjectGroup) -> None:
    markup = to_original_xml(linked_group).replace("<OtherParts>", "<OtherParts><Part />", 1)
    assert from_original_xml(markup).group is None


def test_duplicate_part_identifier_is_a_structural_failure() -> None:
    root = SceneObjectPart(name="root")
    group = SceneObjectGroup(root, [SceneObjectPart(name="twin")])
    markup = to_xml2(group).replace(str(group.children[0].uuid), str(root.uuid))

    assert from_xml2(markup).group is None


def test_encoded_link_numbers_are_preserved() -> None:
    group = SceneObjectGroup(SceneObjectPart(name="root"))
    for number in (1, 3, 2):
        group.add_part(SceneObjectPart(name=f"link {number}", link_number=number))

    for encode, decode in ((to_original_xml, from_original_xml), (to_xml2, from_xml2)):
        restored = decode(encode(group)).unwrap()
        assert [part.link_number for part in restored.children] == [1, 3, 2]
        assert [part.name for part in restored.children] == ["link 1", "link 3", "link 2"]


def test_unset_link_numbers_follow_document_order() -> None:
    group = SceneObjectGroup(SceneObjectPart(name="root"))
    group.add_part(SceneObjectPart(name="a", link_number=5))
    group.add_part(SceneObjectPart(name="b", link_number=2))
    markup = to_xml2(group).replace("<LinkNum>5</LinkNum>", "<LinkNum>0</LinkNum>")

    restored = from_xml2(markup).unwrap()

    assert [part.link_number for part in restored.children] == [1, 2]


def test_xml2_first_part_is_root_regardless_of_link_number() -> None:
    group = SceneObjectGroup(SceneObjectPart(name="root", link_number=4))
    group.add_part(SceneObjectPart(name="child"))

    restored = from_xml2(to_xml2(group)).unwrap()

    assert restored.root_part.name == "root"
    assert restored.root_part.link_number == 4
    assert [part.name for part in restored.children] == ["child"]


def test_xml2_reads_parts_listed_without_wrappers(linked_group: SceneObjectGroup) -> None:
    document = ET.fromstring(to_xml2(linked_group))
    flat = ET.Element("SceneObjectGroup")
    for element in document.iter("SceneObjectPart"):
        flat.append(element)

    restored = from_xml2(ET.tostring(flat, encoding="unicode")).unwrap()

    assert [part.uuid for part in restored.parts] == [part.uuid for part in linked_group.parts]


def test_corrupt_field_only_affects_that_part(linked_group: SceneObjectGroup) -> None:
    target = linked_group.children[0]
    markup = to_original_xml(linked_group)
    good = f"<UUID><UUID>{target.uuid}</UUID></UUID><LocalId>720</LocalId>"
    assert good in markup
    markup = markup.replace(good, f"<UUID><UUID>{target.uuid}</UUID></UUID><LocalId>-5x</LocalId>")

    result = from_original_xml(markup)

    assert result.ok
    assert [(fault.entity_kind, fault.entity_id, fault.tag) for fault in result.faults] == [
        (PART, target.uuid, "LocalId")
    ]
    restored = result.group
    assert restored.children[0].local_id == 0
    assert restored.children[0].name == target.name
    assert restored.root_part == linked_group.root_part
    assert restored.children[1] == linked_group.children[1]


def test_unknown_elements_are_ignored_everywhere(linked_group: SceneObjectGroup) -> None:
    markup = (
        to_original_xml(linked_group)
        .replace("<Name>Root</Name>", "<Name>Root</Name><Glow>0.5</Glow>")
        .replace("<PathCurve>", "<PathWobble>3</PathWobble><PathCurve>")
        .replace("<AssetID>", "<FutureThing><UUID>x</UUID></FutureThing><AssetID>")
    )

    result = from_original_xml(markup)

    assert result.faults == ()
    assert result.group == linked_group


def test_wipe_owners_is_destructive(linked_group: SceneObjectGroup) -> None:
    wiped = to_original_xml(linked_group, options={"wipe-owners": None})
    restored = from_original_xml(wiped).unwrap()
    rewritten = from_original_xml(to_original_xml(restored)).unwrap()

    for part in rewritten.parts:
        assert part.owner_id == NIL_UUID
        assert part.last_owner_id == NIL_UUID
        assert part.creator_id == CREATOR
        for item in part.task_inventory.values():
            assert item.owner_id == NIL_UUID
            assert item.last_owner_id == NIL_UUID
            assert item.creator_id == CREATOR
    assert str(OWNER) not in to_original_xml(rewritten)


def test_home_synthesizes_creator_data(linked_group: SceneObjectGroup, name_service) -> None:
    lookups = []

    def factory():
        lookups.append(True)
        return name_service

    service = LazyUserNameService(factory)
    linked_group.children[0].creator_data = "http://elsewhere.example.com;Original Maker"

    markup = to_original_xml(linked_group, options={"home": "http://grid.example.com"}, user_names=service)
    restored = from_original_xml(markup).unwrap()

    assert restored.root_part.creator_data == "http://grid.example.com;Ada Builder"
    assert restored.children[0].creator_data == "http://elsewhere.example.com;Original Maker"
    assert restored.children[1].creator_data == "http://grid.example.com;Ada Builder"
    item = next(iter(restored.root_part.task_inventory.values()))
    assert item.creator_data == "http://grid.example.com;Ada Builder"
    assert lookups == [True]
    # Root part, right arm and the inventory item each ask for their creator.
    assert name_service.calls == [CREATOR, CREATOR, CREATOR]


def test_home_without_name_service_fails_before_writing(linked_group: SceneObjectGroup) -> None:
    sink = io.StringIO()
    with pytest.raises(ValueError):
        write_original_xml(linked_group, sink, options={"home": "http://grid.example.com"})
    assert sink.getvalue() == ""


FORMATS = (
    (to_original_xml, from_original_xml),
    (functools.partial(to_xml2, include_script_states=True), from_xml2),
)


def test_undecodable_bytes_are_a_structural_failure() -> None:
    payload = b"<SceneObjectGroup>\xff\xfe</SceneObjectGroup>"

    for decode in (from_original_xml, from_xml2):
        result = decode(payload)
        assert result.group is None
        assert result.error.message.startswith("Invalid Xml format")
        assert "\ufffd" in result.error.snapshot

    with pytest.raises(ValueError):
        part_from_xml2(payload)


def test_bytes_honour_the_declared_encoding() -> None:
    group = SceneObjectGroup(SceneObjectPart(name="Café"), [SceneObjectPart(description="Crème brûlée")])
    group.set_script_state(SCRIPT_ITEM, "<Note>Noël</Note>")
    declaration = '<?xml version="1.0" encoding="iso-8859-1"?>'

    for encode, decode in FORMATS:
        payload = (declaration + encode(group)).encode("iso-8859-1")
        result = decode(io.BytesIO(payload))
        assert result.faults == ()
        assert result.group == group


def test_carriage_returns_survive_both_formats() -> None:
    group = SceneObjectGroup(SceneObjectPart(name="sign", description="line1\r\nline2", text="a\rb"))

    for encode, decode in FORMATS:
        markup = encode(group)
        assert "line1&#13;\nline2" in markup
        restored = decode(markup).unwrap().root_part
        assert restored.description == "line1\r\nline2"
        assert restored.text == "a\rb"


def test_characters_xml_cannot_carry_are_dropped_on_write() -> None:
    group = SceneObjectGroup(SceneObjectPart(name="bell\x07", description="tab\tkept\x00"))

    for encode, decode in FORMATS:
        result = decode(encode(group))
        assert result.ok
        assert result.faults == ()
        assert result.group.root_part.name == "bell"
        assert result.group.root_part.description == "tab\tkept"


def test_reencoding_loosely_written_document_is_stable() -> None:
    group = SceneObjectGroup(SceneObjectPart(name="crate", flags=PrimFlags.Physics | PrimFlags.Touch))

    for encode, decode in FORMATS:
        markup = encode(group)
        assert "<Flags>Physics Touch</Flags>" in markup
        assert "<AllowedDrop>false</AllowedDrop>" in markup
        loose = markup.replace("<Flags>Physics Touch</Flags>", "<Flags>Physics, Touch</Flags>").replace(
            "<AllowedDrop>false</AllowedDrop>", "<AllowedDrop>True</AllowedDrop>"
        )

        first = encode(decode(loose).unwrap())
        decoded = decode(first).unwrap()
        second = encode(decoded)

        assert first == second
        assert decoded.root_part.flags == PrimFlags.Physics | PrimFlags.Touch
        assert decoded.root_part.allowed_drop is True


def test_script_state_markup_is_kept_as_written(linked_group: SceneObjectGroup) -> None:
    state = "<E></E><Vars note='single'>a &amp; b</Vars>\n  <Empty/>"
    linked_group.set_script_state(SCRIPT_ITEM, state)

    for encode, decode in FORMATS:
        restored = decode(encode(linked_group)).unwrap()
        assert restored.script_states[SCRIPT_ITEM] == state


def test_self_closing_script_state_is_empty(linked_group: SceneObjectGroup) -> None:
    markup = to_original_xml(linked_group, include_script_states=False).replace(
        "</SceneObjectGroup>",
        f'<GroupScriptStates><SavedScriptState UUID="{SCRIPT_ITEM}"/></GroupScriptStates></SceneObjectGroup>',
    )

    assert from_original_xml(markup).unwrap().script_states == {SCRIPT_ITEM: ""}


def test_script_states_rebuilt_from_elements_without_source_text() -> None:
    document = ET.fromstring(
        f'<GroupScriptStates><SavedScriptState UUID="{SCRIPT_ITEM}"><E></E></SavedScriptState></GroupScriptStates>'
    )
    group = SceneObjectGroup(SceneObjectPart())

    load_script_states(group, document)

    assert group.script_states == {SCRIPT_ITEM: "<E />"}
