"""Session state tests."""

import asyncio

import pytest

from design_prototype.agents.code_generator import CodeGenerator
from design_prototype.agents.graph import GraphEdge, GraphNode, NodeData, NodeNotFoundError
from design_prototype.agents.models import (
    CodeTab,
    ComponentKind,
    Mode,
    Position,
    Size,
)
from design_prototype.core import ParseError, ValidationError
from design_prototype.handlers import (
    CodeEditSurface,
    GenerationInProgressError,
    GenerationStatus,
    Notifier,
    Session,
)
from design_prototype.models.loader import GenerationError
from design_prototype.preview import PLACEHOLDER_PAGE

from conftest import FakeGenerator, GatedGenerator


# ============================================================================
# Collaborator Fakes
# ============================================================================


class RecordingNotifier:
    def __init__(self):
        self.events: list[tuple[str, str]] = []

    def loading(self, message: str) -> None:
        self.events.append(("loading", message))

    def success(self, message: str) -> None:
        self.events.append(("success", message))

    def error(self, message: str) -> None:
        self.events.append(("error", message))


class MemoryEditor:
    def __init__(self):
        self.buffers: dict[CodeTab, str] = {}

    def get_text(self, tab: CodeTab) -> str:
        return self.buffers.get(tab, "")

    def set_text(self, tab: CodeTab, text: str) -> None:
        self.buffers[tab] = text


class StaticGraphEditor:
    def __init__(self, nodes, edges=()):
        self._nodes = list(nodes)
        self._edges = list(edges)

    @property
    def nodes(self):
        return self._nodes

    @property
    def edges(self):
        return self._edges


def make_session(llm, settings, **kwargs) -> Session:
    return Session(generator=CodeGenerator(llm=llm), settings=settings, **kwargs)


# ============================================================================
# Initial State and Input
# ============================================================================


class TestInitialState:
    def test_defaults(self, session):
        state = session.state

        assert state.mode is Mode.TEXT
        assert state.text_input == ""
        assert state.status is GenerationStatus.IDLE
        assert not state.loading
        assert state.artifacts.is_placeholder
        assert session.components == []

    def test_placeholder_preview(self, session):
        assert session.assembled_document == ""
        assert "<h2>Preview</h2>" in session.preview_document

    def test_snapshot(self, session):
        session.add_component("button", 10, 10, text="Go")
        snapshot = session.snapshot()

        assert snapshot["mode"] == "text"
        assert snapshot["loading"] is False
        assert snapshot["components"][0]["kind"] == "button"


class TestInput:
    def test_set_mode_and_text(self, session):
        session.set_mode("wireframe")
        session.set_text("A pricing table")

        assert session.state.mode is Mode.WIREFRAME
        assert session.state.text_input == "A pricing table"

    def test_edit_artifact(self, session):
        session.edit_artifact(CodeTab.CSS, "body{margin:0}")

        assert session.state.artifacts.css == "body{margin:0}"
        assert session.state.artifacts.is_placeholder

    def test_active_tab(self, session):
        session.set_active_tab("javascript")
        assert session.state.active_tab is CodeTab.JAVASCRIPT


# ============================================================================
# Graph Edits
# ============================================================================


class TestGraphEdits:
    def test_add_uses_configured_default_size(self, session):
        component = session.add_component(ComponentKind.INPUT, 30, 40)

        assert component.size == Size(width=150, height=50)
        assert component.position == Position(x=30, y=40)
        assert session.components == [component]

    def test_move_and_update(self, session):
        component = session.add_component("text", 10, 10, text="Hello")

        moved = session.move_component(component.id, 5, -20)
        assert moved.position == Position(x=15, y=0)

        updated = session.update_component(component.id, text="Bye", properties={"variant": "muted"})
        assert updated.text == "Bye"
        assert updated.properties == {"variant": "muted"}

    def test_delete_selected_clears_selection(self, session):
        first = session.add_component("button", 0, 0)
        session.select_component(first.id)
        session.delete_component(first.id)

        assert session.state.selected_id is None
        assert session.components == []

    def test_delete_other_keeps_selection(self, session):
        first = session.add_component("button", 0, 0)
        second = session.add_component("button", 0, 100)
        session.select_component(first.id)
        session.delete_component(second.id)

        assert session.state.selected_id == first.id

    def test_connect_and_delete_removes_edges(self, session):
        first = session.add_component("card", 0, 0)
        second = session.add_component("card", 200, 0)
        edge = session.connect(first.id, second.id)
        assert session.state.graph.edges == (edge,)

        session.delete_component(second.id)
        assert session.state.graph.edges == ()

    def test_disconnect(self, session):
        first = session.add_component("card", 0, 0)
        second = session.add_component("card", 200, 0)
        edge = session.connect(first.id, second.id)

        session.disconnect(edge.id)
        assert session.state.graph.edges == ()

    def test_unknown_component(self, session):
        with pytest.raises(NodeNotFoundError):
            session.select_component("comp_missing")

    def test_clear_selection(self, session):
        component = session.add_component("image", 0, 0)
        session.select_component(component.id)
        session.clear_selection()

        assert session.state.selected_id is None
        assert session.state.graph.selected_id is None


class TestSyncGraph:
    def test_replaces_graph_and_drops_dangling_edges(self, session):
        nodes = [
            GraphNode(id="a", type=ComponentKind.HEADER, data=NodeData(text="Top"), selected=True),
            GraphNode(id="b", type=ComponentKind.BUTTON, position=Position(x=5, y=5), width=80, height=30),
        ]
        edges = [
            GraphEdge(id="e1", source="a", target="b"),
            GraphEdge(id="e2", source="a", target="gone"),
        ]
        session.sync_graph(StaticGraphEditor(nodes, edges))

        assert [c.id for c in session.components] == ["a", "b"]
        assert [e.id for e in session.state.graph.edges] == ["e1"]
        assert session.state.selected_id == "a"

    def test_keeps_single_selection(self, session):
        nodes = [
            GraphNode(id="a", type=ComponentKind.TEXT, selected=True),
            GraphNode(id="b", type=ComponentKind.TEXT, selected=True),
            GraphNode(id="c", type=ComponentKind.TEXT),
        ]
        session.sync_graph(StaticGraphEditor(nodes))

        assert session.state.selected_id == "a"
        assert [node.id for node in session.state.graph.nodes if node.selected] == ["a"]

    def test_duplicate_ids_rejected(self, session):
        nodes = [
            GraphNode(id="a", type=ComponentKind.TEXT),
            GraphNode(id="a", type=ComponentKind.TEXT),
        ]
        with pytest.raises(Exception):
            session.sync_graph(StaticGraphEditor(nodes))
        assert session.components == []


# ============================================================================
# Generation
# ============================================================================


class TestGeneration:
    @pytest.mark.asyncio
    async def test_text_generation_end_to_end(self, settings):
        """Text mode: description in, assembled preview out."""
        llm = FakeGenerator()
        editor = MemoryEditor()
        notifier = RecordingNotifier()
        session = make_session(llm, settings, notifier=notifier, code_surface=editor)

        session.set_text("A red button that says Hi")
        artifacts = await session.generate()

        assert artifacts.html == "<button>Hi</button>"
        assert session.state.artifacts == artifacts
        assert session.state.status is GenerationStatus.IDLE
        assert editor.get_text(CodeTab.CSS) == "button{color:red}"
        assert editor.get_text(CodeTab.JAVASCRIPT) == ""
        assert "<style>button{color:red}</style></head>" in session.assembled_document
        assert "<script" not in session.assembled_document
        assert notifier.events == [
            ("loading", "Generating code..."),
            ("success", "Code generated successfully!"),
        ]

    @pytest.mark.asyncio
    async def test_wireframe_generation_uses_graph(self, settings):
        llm = FakeGenerator()
        session = make_session(llm, settings)
        component = session.add_component("button", 100, 100, text="Buy now")
        session.set_mode(Mode.WIREFRAME)

        await session.generate()

        assert component.id in llm.prompts[0]
        assert "Buy now" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_explicit_mode_and_payload(self, settings, sample_components):
        llm = FakeGenerator()
        session = make_session(llm, settings)

        await session.generate(Mode.WIREFRAME, sample_components)
        assert "comp_header" in llm.prompts[0]
        assert session.state.mode is Mode.TEXT

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   "])
    async def test_empty_description_rejected(self, settings, text):
        llm = FakeGenerator()
        notifier = RecordingNotifier()
        session = make_session(llm, settings, notifier=notifier)
        session.set_text(text)

        with pytest.raises(ValidationError):
            await session.generate()

        assert llm.prompts == []
        assert session.state.status is GenerationStatus.IDLE
        assert session.state.last_error
        assert notifier.events[0][0] == "error"

    @pytest.mark.asyncio
    async def test_empty_wireframe_rejected(self, settings):
        llm = FakeGenerator()
        session = make_session(llm, settings)

        with pytest.raises(ValidationError):
            await session.generate(Mode.WIREFRAME)
        assert llm.prompts == []

    @pytest.mark.asyncio
    async def test_description_too_long(self, settings):
        session = make_session(FakeGenerator(), settings)
        session.set_text("x" * (settings.max_message_length + 1))

        with pytest.raises(ValidationError) as exc_info:
            await session.generate()
        assert f"exceeds {settings.max_message_length}" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_raised_length_limit_applies(self, settings):
        """Descriptions up to a raised max_message_length are accepted."""
        llm = FakeGenerator()
        session = make_session(llm, settings.model_copy(update={"max_message_length": 20_000}))
        session.set_text("x" * 15_000)

        await session.generate()
        assert len(llm.prompts) == 1


class TestGenerationFailures:
    @pytest.mark.asyncio
    async def test_remote_failure_keeps_artifacts(self, settings):
        notifier = RecordingNotifier()
        session = make_session(FakeGenerator(error=RuntimeError("quota exceeded")), settings, notifier=notifier)
        session.edit_artifact(CodeTab.HTML, "<p>hand written</p>")
        before = session.state.artifacts
        session.set_text("anything")

        with pytest.raises(GenerationError):
            await session.generate()

        assert session.state.artifacts == before
        assert session.state.status is GenerationStatus.IDLE
        assert session.state.last_error == "quota exceeded"
        assert notifier.events[-1] == ("error", "Error: quota exceeded")

    @pytest.mark.asyncio
    async def test_parse_failure_adds_retry_hint(self, settings):
        notifier = RecordingNotifier()
        session = make_session(FakeGenerator(responses=["No JSON here."]), settings, notifier=notifier)
        session.set_text("anything")

        with pytest.raises(ParseError):
            await session.generate()

        assert session.state.artifacts.is_placeholder
        assert session.state.last_error.endswith("Please try again.")
        assert session.preview_document == PLACEHOLDER_PAGE

    @pytest.mark.asyncio
    async def test_validation_failure(self, settings):
        session = make_session(FakeGenerator(responses=['{"other": "x"}']), settings)
        session.set_text("anything")

        with pytest.raises(ValidationError):
            await session.generate()
        assert session.state.status is GenerationStatus.IDLE

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, settings):
        llm = FakeGenerator(responses=["garbage", '{"html": "<p>ok</p>"}'])
        session = make_session(llm, settings)
        session.set_text("anything")

        with pytest.raises(ParseError):
            await session.generate()
        artifacts = await session.generate()

        assert artifacts.html == "<p>ok</p>"
        assert session.state.last_error is None


class TestInFlight:
    @pytest.mark.asyncio
    async def test_second_generation_rejected(self, settings):
        llm = GatedGenerator()
        session = make_session(llm, settings)
        session.set_text("first")

        task = asyncio.create_task(session.generate())
        await llm.started.wait()

        assert session.state.loading
        with pytest.raises(GenerationInProgressError):
            await session.generate()

        llm.release.set()
        await task
        assert len(llm.prompts) == 1
        assert not session.state.loading

    @pytest.mark.asyncio
    async def test_edits_allowed_and_isolated_from_in_flight_prompt(self, settings):
        llm = GatedGenerator()
        session = make_session(llm, settings)
        session.set_text("the original description")

        task = asyncio.create_task(session.generate())
        await llm.started.wait()

        session.set_text("an edited description")
        session.set_mode(Mode.WIREFRAME)
        component = session.add_component("card", 0, 0)
        session.select_component(component.id)

        llm.release.set()
        await task

        assert '"the original description"' in llm.prompts[0]
        assert "edited" not in llm.prompts[0]
        assert session.state.text_input == "an edited description"
        assert session.state.selected_id == component.id

    @pytest.mark.asyncio
    async def test_in_flight_failure_returns_to_idle(self, settings):
        llm = GatedGenerator(error=GenerationError("down"))
        session = make_session(llm, settings)
        session.set_text("anything")

        task = asyncio.create_task(session.generate())
        await llm.started.wait()
        llm.release.set()

        with pytest.raises(GenerationError):
            await task
        assert session.state.status is GenerationStatus.IDLE

        llm.error = None
        await session.generate()


def test_fakes_satisfy_protocols():
    assert isinstance(RecordingNotifier(), Notifier)
    assert isinstance(MemoryEditor(), CodeEditSurface)
