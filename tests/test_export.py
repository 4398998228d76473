"""
图导出测试：DOT 文本生成、文件写入与外部渲染程序的错误处理。

渲染部分通过 Mock 替换 subprocess.run，不依赖本机安装 Graphviz。
"""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

import config
from dag.builders import build_layered_dag
from dag.export import (
    DiagramExportError,
    DiagramWriteError,
    RendererError,
    prepare_output_dir,
    render_dot,
    save_dag,
    to_dot,
    write_dot,
)
from dag.graph import Digraph
from schema import SimpleNode


def _chain3() -> tuple[Digraph, list[SimpleNode]]:
    g = Digraph()
    nodes = [SimpleNode() for _ in range(3)]
    for n in nodes:
        g.add_node(n)
    g.add_edge(nodes[0], nodes[1])
    g.add_edge(nodes[1], nodes[2])
    return g, nodes


# ======================================================================
# DOT text
# ======================================================================


class TestToDot:

    def test_header_nodes_and_edges(self):
        g, nodes = _chain3()
        text = to_dot(g)
        lines = text.splitlines()
        assert lines[0] == "digraph G {"
        assert "  rankdir=LR;" in lines
        assert "  node [shape=box, style=rounded, fontsize=12];" in lines
        for i, n in enumerate(nodes):
            assert f'  {i} [label="{n.label()}"];' in lines
        assert "  0 -> 1;" in lines
        assert "  1 -> 2;" in lines
        assert lines[-1] == "}"

    def test_use_names(self):
        g, _ = _chain3()
        text = to_dot(g, use_names=True)
        assert '  0 [label="T0"];' in text
        assert '  2 [label="T2"];' in text

    def test_rank_groups(self):
        a, b, c = SimpleNode(), SimpleNode(), SimpleNode()
        layers = [[a, b], [c]]
        g = build_layered_dag(layers)
        text = to_dot(g, ranks=layers)
        assert "  { rank=same; // layer 0\n    0;\n    1;\n  }" in text
        assert "  { rank=same; // layer 1\n    2;\n  }" in text
        # rank 分组写在边之前
        assert text.index("rank=same") < text.index("->")

    def test_rank_groups_skip_foreign_nodes(self):
        g, (a, _, _) = _chain3()
        text = to_dot(g, ranks=[[a, SimpleNode()]])
        assert "  { rank=same; // layer 0\n    0;\n  }" in text

    def test_edge_to_node_outside_graph_is_skipped(self):
        g, (a, _, _) = _chain3()
        g.add_edge(a, SimpleNode())
        assert to_dot(g).count("->") == 2

    def test_labels_are_escaped(self):
        class QuotedNode(SimpleNode):
            def label(self) -> str:
                return 'say "hi"'

        g = Digraph()
        g.add_node(QuotedNode())
        assert '0 [label="say \\"hi\\""];' in to_dot(g)

    def test_empty_graph(self):
        text = to_dot(Digraph())
        assert "->" not in text
        assert text.startswith("digraph G {")


# ======================================================================
# Files and renderer
# ======================================================================


class TestWriteDot:

    def test_writes_file_and_creates_dirs(self, tmp_path):
        g, _ = _chain3()
        path = write_dot(g, tmp_path / "nested" / "out.dot")
        assert path.exists()
        assert path.read_text(encoding="utf-8") == to_dot(g)

    def test_write_failure(self, tmp_path):
        g, _ = _chain3()
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(DiagramWriteError):
            write_dot(g, blocker / "out.dot")


class TestRenderDot:

    def test_invokes_dot(self, tmp_path):
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
        with patch("dag.export.subprocess.run", return_value=completed) as run:
            out = render_dot(tmp_path / "g.dot", tmp_path / "g.png", fmt="png")
        assert out == tmp_path / "g.png"
        cmd = run.call_args.args[0]
        assert cmd == [config.DOT_BINARY, "-Tpng", str(tmp_path / "g.dot"), "-o", str(tmp_path / "g.png")]
        assert run.call_args.kwargs["timeout"] == config.RENDER_TIMEOUT

    def test_missing_binary(self, tmp_path):
        with patch("dag.export.subprocess.run", side_effect=FileNotFoundError("dot")):
            with pytest.raises(RendererError, match="not found"):
                render_dot(tmp_path / "g.dot", tmp_path / "g.png")

    def test_non_zero_exit(self, tmp_path):
        completed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="syntax error\n")
        with patch("dag.export.subprocess.run", return_value=completed):
            with pytest.raises(RendererError) as exc_info:
                render_dot(tmp_path / "g.dot", tmp_path / "g.png")
        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr == "syntax error"

    def test_renderer_not_executable(self, tmp_path):
        with patch("dag.export.subprocess.run", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(RendererError, match="could not run renderer"):
                render_dot(tmp_path / "g.dot", tmp_path / "g.png")

    def test_renderer_is_a_directory(self, tmp_path):
        with patch("dag.export.subprocess.run", side_effect=IsADirectoryError(21, "Is a directory")):
            with pytest.raises(RendererError):
                render_dot(tmp_path / "g.dot", tmp_path / "g.png")

    def test_timeout(self, tmp_path):
        with patch(
            "dag.export.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="dot", timeout=1),
        ):
            with pytest.raises(RendererError, match="timed out"):
                render_dot(tmp_path / "g.dot", tmp_path / "g.png")

    def test_error_kinds_are_distinct(self):
        assert issubclass(RendererError, DiagramExportError)
        assert issubclass(DiagramWriteError, DiagramExportError)
        assert not issubclass(RendererError, DiagramWriteError)
        assert not issubclass(DiagramWriteError, RendererError)


class TestSaveDag:

    def test_without_render(self, tmp_path):
        g, _ = _chain3()
        with patch("dag.export.subprocess.run") as run:
            dot_path, image_path = save_dag(g, tmp_path / "dag_initial", render=False)
        run.assert_not_called()
        assert dot_path == tmp_path / "dag_initial.dot"
        assert dot_path.exists()
        assert image_path is None

    def test_with_render(self, tmp_path):
        g, _ = _chain3()
        run = MagicMock(return_value=subprocess.CompletedProcess(args=[], returncode=0))
        with patch("dag.export.subprocess.run", run):
            dot_path, image_path = save_dag(g, tmp_path / "dag", use_names=True)
        assert image_path == tmp_path / f"dag.{config.RENDER_FORMAT}"
        assert 'label="T0"' in dot_path.read_text(encoding="utf-8")
        run.assert_called_once()

    def test_render_failure_leaves_dot_file(self, tmp_path):
        g, _ = _chain3()
        with patch("dag.export.subprocess.run", side_effect=FileNotFoundError("dot")):
            with pytest.raises(RendererError):
                save_dag(g, tmp_path / "dag")
        assert (tmp_path / "dag.dot").exists()


class TestPrepareOutputDir:

    def test_creates_missing_dir(self, tmp_path):
        out = prepare_output_dir(tmp_path / "a" / "b")
        assert out.is_dir()

    def test_removes_only_generated_diagrams(self, tmp_path):
        (tmp_path / "dag_initial.dot").write_text("old")
        (tmp_path / f"dag_initial.{config.RENDER_FORMAT}").write_text("old")
        (tmp_path / "important.txt").write_text("keep me")
        (tmp_path / "notes.dot").write_text("keep me")
        (tmp_path / "sub").mkdir()

        prepare_output_dir(tmp_path)

        assert sorted(p.name for p in tmp_path.iterdir()) == ["important.txt", "notes.dot", "sub"]

    def test_path_is_a_file(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(DiagramWriteError):
            prepare_output_dir(blocker)
