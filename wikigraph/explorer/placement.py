"""
새 노드 배치 계산

부모 노드 위치에서 그래프 중심 반대 방향으로 일정 거리만큼 떨어진 좌표를 계산합니다.
"""

import math
from typing import Iterable, Tuple

Position = Tuple[float, float]

SPAWN_DISTANCE = 200.0
VERTICAL_DISTANCE = 100.0


def centroid(positions: Iterable[Position]) -> Position:
    """좌표들의 평균 (좌표가 없으면 원점)"""
    count = 0
    sum_x = sum_y = 0.0
    for x, y in positions:
        sum_x += x
        sum_y += y
        count += 1
    if count == 0:
        return (0.0, 0.0)
    return (sum_x / count, sum_y / count)


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def spawn_position(
    parent: Position,
    center: Position,
    distance: float = SPAWN_DISTANCE,
    vertical_distance: float = VERTICAL_DISTANCE
) -> Tuple[int, int]:
    """
    부모 노드 기준 새 노드 좌표

    Args:
        parent: 부모 노드 좌표
        center: 현재 그래프 중심 좌표
        distance: 부모로부터의 거리
        vertical_distance: 부모와 중심의 x 좌표가 같을 때의 수직 거리

    Returns:
        Tuple[int, int]: 정수로 반올림된 좌표
    """
    dx = center[0] - parent[0]
    dy = center[1] - parent[1]

    if dx == 0:
        # 부모가 중심이면 위쪽
        direction = -_sign(dy) or -1
        return (round(parent[0]), round(parent[1] + direction * vertical_distance))

    slope = dy / dx
    rel_x = -_sign(dx) * distance / math.sqrt(slope * slope + 1)
    rel_y = rel_x * slope
    return (round(parent[0] + rel_x), round(parent[1] + rel_y))
