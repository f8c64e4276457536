"""Tests for Notebook graph operations and the backlink invariant."""

from __future__ import annotations

import time
import uuid

import pytest

from nexia.core import CircularLink, Note, Notebook, NoteNotFound


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def assert_consistent(nb: Notebook) -> None:
    """T in S.links  <=>  S in backlinks[T], for notes in the graph."""
    for source in nb.all_notes():
        for target in source.links:
            assert source.id in nb.get_backlinks(target)
    for target, sources in nb.backlinks.items():
        assert sources, f"empty backlink set kept for {target}"
        for source_id in sources:
            source = nb.get_note(source_id)
            assert source is not None
            assert source.links_to(target)


@pytest.fixture()
def nb() -> Notebook:
    return Notebook("Test")


# ---------------------------------------------------------------------------
# Basics
# ---------------------------------------------------------------------------

class TestBasics:
    def test_new_notebook(self, nb: Notebook) -> None:
        assert nb.name == "Test"
        assert nb.is_empty()
        assert len(nb) == 0
        assert nb.created_at == nb.modified_at

    def test_default_name(self) -> None:
        assert Notebook().name == "Untitled Notebook"

    def test_create_and_get_note(self, nb: Notebook) -> None:
        nid = nb.create_note("First Note")
        note = nb.get_note(nid)
        assert note is not None
        assert note.title == "First Note"
        assert len(nb) == 1
        assert nid in nb

    def test_get_missing_note(self, nb: Notebook) -> None:
        assert nb.get_note(uuid.uuid4()) is None

    def test_get_note_mut_touches_notebook(self, nb: Notebook) -> None:
        nid = nb.create_note("A")
        before = nb.modified_at
        time.sleep(0.002)
        note = nb.get_note_mut(nid)
        assert note is not None
        assert nb.modified_at > before

    def test_all_notes_is_restartable(self, nb: Notebook) -> None:
        ids = {nb.create_note(t) for t in ("a", "b", "c")}
        view = nb.all_note_ids()
        assert set(view) == ids
        assert set(view) == ids
        assert {n.id for n in nb.all_notes()} == ids

    def test_notes_view_is_read_only(self, nb: Notebook) -> None:
        with pytest.raises(TypeError):
            nb.notes[uuid.uuid4()] = Note.create("x")  # type: ignore[index]


# ---------------------------------------------------------------------------
# add_note with pre-built links
# ---------------------------------------------------------------------------

class TestAddNote:
    def test_indexes_existing_links(self, nb: Notebook) -> None:
        target = nb.create_note("Target")
        note = Note.create("Source")
        note.add_link(target)
        nb.add_note(note)
        assert nb.get_backlinks(target) == [note.id]
        assert_consistent(nb)

    def test_indexes_links_to_absent_notes(self, nb: Notebook) -> None:
        pending = uuid.uuid4()
        note = Note.create("Source")
        note.add_link(pending)
        nb.add_note(note)
        assert nb.get_backlinks(pending) == [note.id]

    def test_replacing_note_withdraws_old_edges(self, nb: Notebook) -> None:
        a = nb.create_note("A")
        b = nb.create_note("B")
        src = nb.create_note("Src")
        nb.link_notes(src, a)

        replacement = Note(title="Src v2", id=src, links=[b])
        nb.add_note(replacement)

        assert nb.get_backlinks(a) == []
        assert nb.get_backlinks(b) == [src]
        assert_consistent(nb)


# ---------------------------------------------------------------------------
# link / unlink
# ---------------------------------------------------------------------------

class TestLinking:
    def test_link_notes(self, nb: Notebook) -> None:
        a = nb.create_note("Note 1")
        b = nb.create_note("Note 2")
        nb.link_notes(a, b)
        assert nb.get_note(a).links_to(b)
        assert a in nb.get_backlinks(b)
        assert_consistent(nb)

    def test_link_is_idempotent(self, nb: Notebook) -> None:
        a = nb.create_note("A")
        b = nb.create_note("B")
        nb.link_notes(a, b)
        links_once, backlinks_once = list(nb.get_note(a).links), nb.backlinks
        nb.link_notes(a, b)
        assert nb.get_note(a).links == links_once
        assert nb.backlinks == backlinks_once

    def test_self_link_is_noop(self, nb: Notebook) -> None:
        a = nb.create_note("A")
        nb.link_notes(a, a)
        assert nb.get_note(a).links == []
        assert nb.get_backlinks(a) == []
        assert_consistent(nb)

    def test_link_missing_target(self, nb: Notebook) -> None:
        a = nb.create_note("A")
        missing = uuid.uuid4()
        before_links = list(nb.get_note(a).links)
        before_index = nb.backlinks

        with pytest.raises(NoteNotFound) as excinfo:
            nb.link_notes(a, missing)

        assert excinfo.value.note_id == missing
        assert nb.get_note(a).links == before_links
        assert nb.backlinks == before_index

    def test_link_missing_source(self, nb: Notebook) -> None:
        b = nb.create_note("B")
        missing = uuid.uuid4()
        with pytest.raises(NoteNotFound) as excinfo:
            nb.link_notes(missing, b)
        assert excinfo.value.note_id == missing

    def test_cycles_allowed_by_default(self, nb: Notebook) -> None:
        a = nb.create_note("A")
        b = nb.create_note("B")
        nb.link_notes(a, b)
        nb.link_notes(b, a)
        assert nb.get_note(b).links_to(a)
        assert_consistent(nb)

    def test_unlink(self, nb: Notebook) -> None:
        a = nb.create_note("A")
        b = nb.create_note("B")
        nb.link_notes(a, b)
        nb.unlink_notes(a, b)
        assert not nb.get_note(a).links_to(b)
        assert nb.get_backlinks(b) == []
        assert b not in nb.backlinks
        assert_consistent(nb)

    def test_unlink_dangling_target(self, nb: Notebook) -> None:
        pending = uuid.uuid4()
        note = Note.create("Source")
        note.add_link(pending)
        nb.add_note(note)

        nb.unlink_notes(note.id, pending)
        assert note.links == []
        assert nb.get_backlinks(pending) == []

    def test_unlink_missing_source(self, nb: Notebook) -> None:
        with pytest.raises(NoteNotFound):
            nb.unlink_notes(uuid.uuid4(), uuid.uuid4())


class TestCyclePolicy:
    def test_rejects_direct_cycle(self) -> None:
        nb = Notebook("Strict", allow_cycles=False)
        a = nb.create_note("A")
        b = nb.create_note("B")
        nb.link_notes(a, b)
        with pytest.raises(CircularLink):
            nb.link_notes(b, a)
        assert nb.get_note(b).links == []
        assert_consistent(nb)

    def test_rejects_indirect_cycle(self) -> None:
        nb = Notebook("Strict", allow_cycles=False)
        a, b, c = (nb.create_note(t) for t in "ABC")
        nb.link_notes(a, b)
        nb.link_notes(b, c)
        with pytest.raises(CircularLink):
            nb.link_notes(c, a)

    def test_allows_diamond(self) -> None:
        nb = Notebook("Strict", allow_cycles=False)
        a, b, c, d = (nb.create_note(t) for t in "ABCD")
        nb.link_notes(a, b)
        nb.link_notes(a, c)
        nb.link_notes(b, d)
        nb.link_notes(c, d)
        assert sorted(nb.get_backlinks(d)) == sorted([b, c])


# ---------------------------------------------------------------------------
# remove_note cascade
# ---------------------------------------------------------------------------

class TestRemoveNote:
    def test_remove_middle_of_chain(self, nb: Notebook) -> None:
        a = nb.create_note("Alpha")
        b = nb.create_note("Beta")
        c = nb.create_note("Gamma")
        nb.link_notes(a, b)
        nb.link_notes(b, c)

        removed = nb.remove_note(b)

        assert removed is not None and removed.title == "Beta"
        assert nb.get_note(a).links == []
        assert nb.get_backlinks(c) == []
        assert len(nb) == 2
        assert_consistent(nb)

    def test_remove_leaves_no_dangling_references(self, nb: Notebook) -> None:
        hub = nb.create_note("Hub")
        spokes = [nb.create_note(f"S{i}") for i in range(4)]
        for s in spokes:
            nb.link_notes(s, hub)
            nb.link_notes(hub, s)

        nb.remove_note(hub)

        for s in spokes:
            assert not nb.get_note(s).links_to(hub)
            assert nb.get_backlinks(s) == []
        assert nb.get_backlinks(hub) == []
        assert_consistent(nb)

    def test_remove_missing(self, nb: Notebook) -> None:
        assert nb.remove_note(uuid.uuid4()) is None


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class TestSearch:
    @pytest.fixture()
    def populated(self, nb: Notebook) -> tuple[Notebook, uuid.UUID, uuid.UUID]:
        id1 = nb.create_note("Meeting Notes")
        nb.get_note_mut(id1).content = "Discussion about project timeline"
        id2 = nb.create_note("Project Plan")
        nb.get_note_mut(id2).content = "Milestones and deliverables"
        return nb, id1, id2

    def test_title_case_insensitive(self, populated) -> None:
        nb, id1, _ = populated
        assert [n.id for n in nb.search_by_title("meeting")] == [id1]
        assert [n.id for n in nb.search_by_title("MEETING")] == [id1]

    def test_content(self, populated) -> None:
        nb, id1, _ = populated
        assert [n.id for n in nb.search_by_content("project")] == [id1]

    def test_combined(self, populated) -> None:
        nb, id1, id2 = populated
        assert {n.id for n in nb.search("project")} == {id1, id2}

    def test_empty_query_matches_all(self, populated) -> None:
        nb, _, _ = populated
        assert len(nb.search("")) == 2

    def test_no_match(self, populated) -> None:
        nb, _, _ = populated
        assert nb.search("zebra") == []


# ---------------------------------------------------------------------------
# Index maintenance
# ---------------------------------------------------------------------------

class TestRebuildBacklinks:
    def test_rebuild_matches_incremental_index(self, nb: Notebook) -> None:
        ids = [nb.create_note(str(i)) for i in range(5)]
        for i, src in enumerate(ids):
            for tgt in ids[i + 1:]:
                nb.link_notes(src, tgt)
        before = nb.backlinks
        nb.rebuild_backlinks()
        assert nb.backlinks == before

    def test_from_notes_keeps_timestamps(self) -> None:
        a = Note.create("A")
        b = Note.create("B")
        a.add_link(b.id)
        template = Notebook("Loaded")
        nb = Notebook.from_notes(
            [a, b], "Loaded", created_at=template.created_at, modified_at=template.modified_at
        )
        assert nb.modified_at == template.modified_at
        assert nb.get_backlinks(b.id) == [a.id]
