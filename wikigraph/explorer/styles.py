"""
노드/엣지 표시 스타일

노드 변형 타입별 색상·모양을 결정하고 렌더러에 넘길 딕셔너리를 만듭니다.
"""

from typing import Any, Dict, List

from .models import EdgeKind, ExplorerEdge, ExplorerNode, RootNode, TagNode

PAGE_COLOR = "#03A9F4"
TAG_COLOR = "#4CAF50"
ROOT_COLOR = "#E53935"
HIGHLIGHT_COLOR = "#FFC107"
TAG_EDGE_COLOR = "#81C784"

LEVEL_LIGHTEN_PERCENT = 5
HIGHLIGHT_EDGE_WIDTH = 5
DEFAULT_EDGE_WIDTH = 1

ROOT_LABEL_WIDTH = 20
CHILD_LABEL_WIDTH = 15


def hex_to_rgb(hex_color: str) -> List[int]:
    hex_color = hex_color.lstrip("#")
    return [int(hex_color[i:i + 2], 16) for i in (0, 2, 4)]


def rgb_to_hex(rgb: List[float]) -> str:
    return "#" + "".join(f"{round(channel):02x}" for channel in rgb)


def lighten_hex(hex_color: str, percent: float) -> str:
    """색상을 흰색 쪽으로 percent% 만큼 밝게"""
    percent = min(percent, 100)
    return rgb_to_hex([c + percent / 100.0 * (255 - c) for c in hex_to_rgb(hex_color)])


def page_color(level: int) -> str:
    return lighten_hex(PAGE_COLOR, LEVEL_LIGHTEN_PERCENT * level)


def highlight_color(level: int) -> str:
    return lighten_hex(HIGHLIGHT_COLOR, LEVEL_LIGHTEN_PERCENT * level)


def node_color(node: ExplorerNode) -> str:
    if isinstance(node, TagNode):
        return TAG_COLOR
    if isinstance(node, RootNode):
        return ROOT_COLOR
    return page_color(node.level)


def node_shape(node: ExplorerNode) -> str:
    if isinstance(node, TagNode):
        return "diamond"
    if isinstance(node, RootNode):
        return "square"
    return "dot"


def word_wrap(text: str, limit: int) -> str:
    """단어 단위 줄바꿈 (한 줄 최대 limit자)"""
    lines = [""]
    for word in text.split(" "):
        if len(lines[-1]) + len(word) > limit:
            lines.append(word)
        else:
            lines[-1] = lines[-1] + " " + word
    return "\n".join(line.strip() for line in lines).strip()


def unwrap(text: str) -> str:
    return text.replace("\n", " ")


def render_node(
    node: ExplorerNode,
    highlighted: bool = False,
    with_position: bool = True
) -> Dict[str, Any]:
    """
    렌더러용 노드 딕셔너리

    갱신(update)용으로 만들 때는 with_position=False로 좌표를 빼서
    렌더러가 옮겨 놓은 위치를 유지합니다.
    """
    data: Dict[str, Any] = {
        "id": node.id,
        "label": node.label,
        "level": node.level,
        "nodeType": node.kind,
        "color": highlight_color(node.level) if highlighted else node_color(node),
        "shape": node_shape(node),
        "value": 2 if isinstance(node, RootNode) else 1,
    }
    if isinstance(node, TagNode):
        data["tagName"] = node.tag_name
    else:
        data["pageId"] = node.page_id
    if with_position and node.x is not None and node.y is not None:
        data["x"] = node.x
        data["y"] = node.y
    return data


def render_edge(edge: ExplorerEdge, highlighted: bool = False) -> Dict[str, Any]:
    """렌더러용 엣지 딕셔너리 (태그 엣지는 점선)"""
    if highlighted:
        color: Any = {"inherit": "to"}
    elif edge.kind == EdgeKind.TAG:
        color = {"color": TAG_EDGE_COLOR, "opacity": 0.6}
    else:
        color = page_color(edge.level)

    return {
        "id": edge.id,
        "from": edge.source,
        "to": edge.target,
        "level": edge.level,
        "color": color,
        "dashes": edge.kind == EdgeKind.TAG,
        "width": HIGHLIGHT_EDGE_WIDTH if highlighted else DEFAULT_EDGE_WIDTH,
    }
