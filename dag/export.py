"""
Diagram export - Graphviz DOT output and rendering.
图导出 —— 生成 Graphviz DOT 描述并调用外部程序渲染。

Any Digraph can be exported; nodes get stable integer indices from their
position in the node list, and optional rank groups (e.g. execution layers)
are drawn on the same rank.
任何 Digraph 都可以导出：节点按其在节点列表中的位置编号，
可选的 rank 分组（例如执行层）会被绘制在同一层级。

Writing the .dot file and running the renderer fail with distinct errors:
DiagramWriteError and RendererError.
写入 .dot 文件和运行渲染程序分别抛出不同异常：DiagramWriteError 与 RendererError。
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from uuid import UUID

import config
from dag.graph import Digraph
from schema import Node

logger = logging.getLogger(__name__)


class DiagramExportError(Exception):
    """Base class for diagram export failures. 图导出异常基类。"""


class DiagramWriteError(DiagramExportError):
    """
    Raised when the .dot file cannot be created or written.
    无法创建或写入 .dot 文件时抛出。
    """


class RendererError(DiagramExportError):
    """
    Raised when the external renderer is missing, times out, or exits non-zero.
    外部渲染程序不存在、超时或返回非零退出码时抛出。
    """

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def to_dot(
    g: Digraph,
    ranks: Sequence[Sequence[Node]] | None = None,
    use_names: bool = False,
) -> str:
    """
    Render `g` as Graphviz DOT text.
    将图转换为 Graphviz DOT 文本。

    Args:
        ranks:     optional groups of nodes to keep on the same rank
        use_names: label nodes T0..Tn-1 instead of their identity label
        ranks:     可选的同层节点分组
        use_names: 使用 T0..Tn-1 作为标签，而不是节点 ID 前缀
    """
    nodes = g.all_nodes()
    idx: dict[UUID, int] = {node.id: i for i, node in enumerate(nodes)}

    lines = [
        "digraph G {",
        "  rankdir=LR;",
        "  node [shape=box, style=rounded, fontsize=12];",
    ]

    for i, node in enumerate(nodes):
        label = f"T{i}" if use_names else node.label()
        lines.append(f"  {i} [label={_quote(label)}];")

    # 可选的 rank 约束：同一层的节点横向对齐
    for ri, layer in enumerate(ranks or []):
        lines.append(f"  {{ rank=same; // layer {ri}")
        for node in layer:
            j = idx.get(node.id)
            if j is not None:
                lines.append(f"    {j};")
        lines.append("  }")

    for i, u in enumerate(nodes):
        for v in g.adjacency_from(u):
            j = idx.get(v.id)
            if j is None:
                logger.warning("[EXPORT] Skipping edge to node %s not in graph", v.label())
                continue
            lines.append(f"  {i} -> {j};")

    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(
    g: Digraph,
    path: str | Path,
    ranks: Sequence[Sequence[Node]] | None = None,
    use_names: bool = False,
) -> Path:
    """
    Write the DOT description of `g` to `path`, creating parent directories.
    将 DOT 描述写入文件（自动创建父目录）。
    """
    path = Path(path)
    text = to_dot(g, ranks=ranks, use_names=use_names)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise DiagramWriteError(f"could not write {path}: {exc}") from exc
    logger.debug("[EXPORT] Wrote %s (%d bytes)", path, len(text))
    return path


def render_dot(
    dot_path: str | Path,
    output_path: str | Path,
    fmt: str | None = None,
) -> Path:
    """
    Rasterize a .dot file with the external Graphviz binary.
    调用外部 Graphviz 程序将 .dot 文件渲染为图片。
    """
    fmt = fmt or config.RENDER_FORMAT
    output_path = Path(output_path)
    cmd = [config.DOT_BINARY, f"-T{fmt}", str(dot_path), "-o", str(output_path)]

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=config.RENDER_TIMEOUT,
        )
    except subprocess.TimeoutExpired as exc:
        raise RendererError(
            f"renderer timed out after {config.RENDER_TIMEOUT}s"
        ) from exc
    except FileNotFoundError as exc:
        raise RendererError(f"renderer '{config.DOT_BINARY}' not found") from exc
    except OSError as exc:
        # 不可执行的文件、目录等
        raise RendererError(f"could not run renderer '{config.DOT_BINARY}': {exc}") from exc

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise RendererError(
            f"failed to run {config.DOT_BINARY} (exit code {result.returncode}): {stderr}",
            returncode=result.returncode,
            stderr=stderr,
        )
    return output_path


def prepare_output_dir(out_dir: str | Path, prefix: str = "dag_") -> Path:
    """
    Create `out_dir` and remove diagrams left by a previous run.
    创建输出目录，并清理上一次运行留下的图文件。

    Only <prefix>*.dot and <prefix>*.<format> files are deleted; anything
    else in the directory is left alone.
    只删除 <prefix>*.dot 与 <prefix>*.<format> 文件，目录中其他内容保持不变。
    """
    out_dir = Path(out_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        for suffix in {"dot", config.RENDER_FORMAT}:
            for stale in out_dir.glob(f"{prefix}*.{suffix}"):
                if stale.is_file():
                    stale.unlink()
                    logger.debug("[EXPORT] Removed stale %s", stale)
    except OSError as exc:
        raise DiagramWriteError(f"could not prepare output dir {out_dir}: {exc}") from exc
    return out_dir


def save_dag(
    g: Digraph,
    filename_base: str | Path,
    ranks: Sequence[Sequence[Node]] | None = None,
    use_names: bool = False,
    render: bool = True,
) -> tuple[Path, Path | None]:
    """
    Save `g` as <base>.dot and, if `render`, as <base>.<format>.
    将图保存为 <base>.dot，render=True 时同时渲染为 <base>.<format>。

    Returns (dot_path, image_path); image_path is None when not rendered.
    返回 (dot_path, image_path)；未渲染时 image_path 为 None。
    """
    base = Path(filename_base)
    dot_path = write_dot(g, base.with_name(base.name + ".dot"), ranks=ranks, use_names=use_names)

    image_path = None
    if render:
        image_path = render_dot(dot_path, base.with_name(f"{base.name}.{config.RENDER_FORMAT}"))

    logger.info(
        "[EXPORT] Saved %s as %s%s",
        g.summary(), dot_path, f" and {image_path}" if image_path else "",
    )
    return dot_path, image_path
