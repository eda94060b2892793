"""Tests for the WorkflowStore."""

import pytest

from conftest import add_palette_node, make_node
from marketflow.errors import ValidationError
from marketflow.graph import (
    NodePosition,
    WorkflowData,
    WorkflowStore,
    encode_drag_payload,
    factory,
    get_definition,
)
from marketflow.graph.factory import ID_ALPHABET, ID_SUFFIX_LENGTH


def _graph(store):
    return store.get_workflow_data().to_dict()


def _chain(store, *types):
    nodes = [add_palette_node(store, t) for t in types]
    for source, target in zip(nodes, nodes[1:]):
        store.on_connect({"source": source.id, "target": target.id})
    return nodes


class TestDropAndUndo:
    """Tests for dropping palette nodes and undo/redo."""

    def test_drop_undo_redo(self, store):
        payload = encode_drag_payload(get_definition("gpt4"))
        node = store.drop_node(payload, NodePosition(100, 100))

        assert len(store.nodes) == 1
        assert store.edges == []
        assert store.can_undo

        store.undo()
        assert store.nodes == []
        assert not store.can_undo
        assert store.can_redo

        store.redo()
        assert len(store.nodes) == 1
        assert store.nodes[0].id == node.id
        assert store.nodes[0].position == NodePosition(100, 100)

    def test_malformed_drop_creates_nothing(self, store):
        assert store.drop_node("{not json", NodePosition(0, 0)) is None
        assert store.drop_node({"type": "gpt4"}, NodePosition(0, 0)) is None
        assert store.nodes == []
        assert not store.can_undo

    def test_undo_and_redo_on_empty_stacks(self, store):
        store.undo()
        store.redo()
        assert store.nodes == []

    def test_undo_restores_every_step(self, store):
        before = _graph(store)
        a, b = _chain(store, "crm", "email")
        store.on_nodes_change([{"type": "position", "id": a.id, "position": {"x": 5, "y": 5}}])
        store.duplicate_node(b.id)
        store.delete_node(a.id)

        for _ in range(6):
            store.undo()
        assert _graph(store) == before
        assert not store.can_undo

    def test_new_mutation_clears_redo(self, store):
        add_palette_node(store, "crm")
        store.undo()
        add_palette_node(store, "email")
        assert not store.can_redo
        store.redo()
        assert [n.type for n in store.nodes] == ["email"]

    def test_history_limit(self):
        store = WorkflowStore(history_limit=2)
        for node_type in ("crm", "filter", "email"):
            add_palette_node(store, node_type)
        store.undo()
        store.undo()
        store.undo()
        assert [n.type for n in store.nodes] == ["crm"]


class TestConnect:
    """Tests for on_connect."""

    def test_connect_creates_animated_edge(self, store):
        a = add_palette_node(store, "crm")
        b = add_palette_node(store, "filter")
        edge = store.on_connect({"source": a.id, "target": b.id})
        assert edge.animated
        assert store.edges == [edge]

    def test_duplicate_connection_records_no_history(self, store):
        a = add_palette_node(store, "crm")
        b = add_palette_node(store, "filter")
        store.on_connect({"source": a.id, "target": b.id})
        depth = store.history.undo_depth
        assert store.on_connect({"source": a.id, "target": b.id}) is None
        assert store.history.undo_depth == depth
        assert len(store.edges) == 1

    def test_unknown_endpoint_is_ignored(self, store):
        a = add_palette_node(store, "crm")
        assert store.on_connect({"source": a.id, "target": "ghost"}) is None
        assert store.edges == []


class TestDelete:
    """Tests for node and selection deletion."""

    def test_cascade_delete(self, store):
        a, b, c = _chain(store, "crm", "filter", "email")
        store.on_connect({"source": a.id, "target": c.id})

        store.delete_node(b.id)

        assert [n.id for n in store.nodes] == [a.id, c.id]
        assert [(e.source, e.target) for e in store.edges] == [(a.id, c.id)]

    def test_stale_delete_is_noop(self, store):
        a = add_palette_node(store, "crm")
        store.delete_node(a.id)
        depth = store.history.undo_depth
        store.delete_node(a.id)
        assert store.history.undo_depth == depth

    def test_remove_change_cascades(self, store):
        a, b = _chain(store, "crm", "filter")
        store.on_nodes_change([{"type": "remove", "id": a.id}])
        assert store.edges == []

    def test_delete_selected_elements(self, store):
        a, b, c = _chain(store, "crm", "filter", "email")
        store.on_nodes_change([{"type": "select", "id": a.id, "selected": True}])
        store.on_edges_change([{"type": "select", "id": store.edges[1].id, "selected": True}])

        store.delete_selected_elements()

        assert [n.id for n in store.nodes] == [b.id, c.id]
        assert store.edges == []

    def test_delete_selected_without_selection(self, store):
        add_palette_node(store, "crm")
        depth = store.history.undo_depth
        store.delete_selected_elements()
        assert store.history.undo_depth == depth
        assert len(store.nodes) == 1

    def test_deleted_ids_are_not_reissued(self, store):
        seen = set()
        for _ in range(30):
            node = add_palette_node(store, "crm")
            assert node.id not in seen
            seen.add(node.id)
            store.delete_node(node.id)

    def test_ids_added_by_change_batch_are_reserved(self, store, monkeypatch):
        node_id = f"crm-{ID_ALPHABET[0] * ID_SUFFIX_LENGTH}"
        store.on_nodes_change([{"type": "add", "item": make_node(node_id, "crm").to_dict()}])
        store.on_nodes_change([{"type": "remove", "id": node_id}])

        monkeypatch.setattr(factory.secrets, "choice", lambda seq: seq[0])
        with pytest.raises(RuntimeError):
            add_palette_node(store, "crm")


class TestDuplicate:
    """Tests for duplicate_node."""

    def test_duplicate_isolation(self, store):
        a, b = _chain(store, "crm", "filter")
        clone = store.duplicate_node(a.id)

        assert clone.id != a.id
        assert clone.position == a.position.offset(50, 50)
        assert clone.data == a.data
        assert clone.data is not store.get_node(a.id).data
        assert not any(e.touches(clone.id) for e in store.edges)

    def test_duplicate_missing_node(self, store):
        assert store.duplicate_node("ghost") is None
        assert not store.can_undo


class TestPropertyPanel:
    """Tests for selection, drafts, and applying edits."""

    def test_reset_then_apply(self, store):
        a = add_palette_node(store, "crm")
        store.on_node_click(a.id)
        assert store.show_property_panel
        original = dict(store.get_node(a.id).data)

        store.edit_draft(name="X")
        store.reset_edits()
        assert store.get_node(a.id).data == original

        depth = store.history.undo_depth
        store.edit_draft(name="X")
        store.apply_edits()
        assert store.get_node(a.id).data["name"] == "X"
        assert store.history.undo_depth == depth + 1

        store.undo()
        assert store.get_node(a.id).data == original

    def test_draft_is_not_committed(self, store):
        a = add_palette_node(store, "crm")
        store.select_node(a.id)
        store.edit_draft(entity="Accounts")
        assert store.get_node(a.id).data["entity"] == "Leads"

    def test_apply_without_selection_is_noop(self, store):
        add_palette_node(store, "crm")
        depth = store.history.undo_depth
        assert store.apply_edits() is None
        assert store.history.undo_depth == depth

    def test_apply_invalid_draft_raises(self, store):
        a = add_palette_node(store, "gpt4")
        store.select_node(a.id)
        store.edit_draft(temperature=9)
        depth = store.history.undo_depth
        with pytest.raises(ValidationError):
            store.apply_edits()
        assert store.history.undo_depth == depth
        assert store.get_node(a.id).data["temperature"] == 0.7

    def test_apply_replacement_draft(self, store):
        a = add_palette_node(store, "crm")
        store.select_node(a.id)
        store.apply_edits({"label": "Accounts", "entity": "Accounts"})
        assert store.get_node(a.id).data == {"label": "Accounts", "entity": "Accounts"}

    def test_panel_closes_when_node_deleted(self, store):
        a = add_palette_node(store, "crm")
        store.select_node(a.id)
        store.delete_node(a.id)
        assert store.selected_node is None
        assert not store.show_property_panel

    def test_close_panel(self, store):
        a = add_palette_node(store, "crm")
        store.select_node(a.id)
        store.close_panel()
        assert store.selection.draft is None
        assert not store.show_property_panel

    def test_select_unknown_node(self, store):
        store.select_node("ghost")
        assert not store.show_property_panel


class TestLayout:
    """Tests for layout operations."""

    def test_auto_layout_scenario(self, store):
        a, b, c, d = _chain(store, "crm", "filter", "gpt4", "email")
        edges_before = [(e.id, e.source, e.target) for e in store.edges]

        store.auto_layout()

        assert [n.position.x for n in store.nodes] == [100, 420, 740, 1060]
        assert all(n.position.y == 100 for n in store.nodes)
        assert [(e.id, e.source, e.target) for e in store.edges] == edges_before

        store.undo()
        assert all(n.position == NodePosition(0, 0) for n in store.nodes)

    def test_align_selected(self, store):
        a = add_palette_node(store, "crm", x=100)
        b = add_palette_node(store, "filter", x=300, y=200)
        store.on_nodes_change(
            [
                {"type": "select", "id": a.id, "selected": True},
                {"type": "select", "id": b.id, "selected": True},
            ]
        )
        store.align_selected_nodes()
        assert [n.position.x for n in store.nodes] == [200, 200]

    def test_align_needs_two_nodes(self, store):
        a = add_palette_node(store, "crm", x=100)
        store.on_nodes_change([{"type": "select", "id": a.id, "selected": True}])
        depth = store.history.undo_depth
        store.align_selected_nodes()
        assert store.history.undo_depth == depth


class TestWorkflowLifecycle:
    """Tests for loading, resetting, and subscriptions."""

    def test_load_clears_history(self, store):
        add_palette_node(store, "crm")
        data = WorkflowData.from_dict(
            {
                "nodes": [{"id": "n1", "type": "email", "position": {"x": 1, "y": 2}}],
                "edges": [],
            }
        )
        store.load_workflow(data, workflow_id=7, name="Loaded")

        assert [n.id for n in store.nodes] == ["n1"]
        assert store.workflow_id == 7
        assert store.workflow_name == "Loaded"
        assert not store.can_undo
        assert not store.can_redo

    def test_load_drops_dangling_edges(self, store):
        store.load_workflow(
            {
                "nodes": [{"id": "n1", "type": "crm"}],
                "edges": [{"id": "e1", "source": "n1", "target": "gone"}],
            }
        )
        assert store.edges == []

    def test_load_is_detached_from_input(self, store):
        data = WorkflowData.from_dict({"nodes": [{"id": "n1", "type": "crm", "data": {"a": 1}}]})
        store.load_workflow(data)
        data.nodes[0].data["a"] = 2
        assert store.nodes[0].data["a"] == 1

    def test_get_workflow_data_is_a_snapshot(self, store):
        a = add_palette_node(store, "crm")
        snapshot = store.get_workflow_data()
        snapshot.nodes[0].data["entity"] = "changed"
        assert store.get_node(a.id).data["entity"] == "Leads"

    def test_new_workflow(self, store):
        add_palette_node(store, "crm")
        store.set_workflow_id(3)
        store.set_workflow_name("Campaign")
        store.new_workflow()
        assert store.nodes == []
        assert store.workflow_id is None
        assert store.workflow_name == "Untitled Workflow"
        assert not store.can_undo

    def test_subscribe_and_unsubscribe(self, store):
        calls = []
        unsubscribe = store.subscribe(lambda s: calls.append(len(s.nodes)))
        add_palette_node(store, "crm")
        unsubscribe()
        add_palette_node(store, "email")
        assert calls == [1]

    def test_failing_listener_does_not_break_store(self, store):
        def boom(_store):
            raise RuntimeError("listener failure")

        store.subscribe(boom)
        add_palette_node(store, "crm")
        assert len(store.nodes) == 1

    def test_separate_stores_are_independent(self):
        first = WorkflowStore()
        second = WorkflowStore()
        add_palette_node(first, "crm")
        assert second.nodes == []
        assert not second.can_undo

    def test_ui_flags(self, store):
        store.set_sidebar_collapsed(True)
        store.set_show_property_panel(True)
        assert store.is_sidebar_collapsed
        assert store.show_property_panel

    def test_empty_change_batch_is_noop(self, store):
        store.on_nodes_change([])
        store.on_edges_change([])
        assert not store.can_undo
