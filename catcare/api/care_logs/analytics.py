# catcare/api/care_logs/analytics.py
"""
케어 기록으로부터 계산되는 파생 데이터 (저장하지 않고 조회 시마다 계산)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Sequence

from catcare.models.care_log import CareLog, LogType, parse_weight
from catcare.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeightPoint:
    timestamp: datetime
    date: str       # 그래프 x축 라벨
    weight: float


class WeightTrend(Enum):
    INCREASING = "increasing"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


def weight_series(logs: Iterable[CareLog]) -> List[WeightPoint]:
    """
    체중 기록만 골라 시간순(오름차순)으로 정렬한 시계열을 반환합니다.

    저장소는 최신순으로 기록을 돌려주지만, 입력 순서와 관계없이 항상 정렬합니다.
    값이 없거나 숫자로 해석할 수 없는 체중 기록은 예외 없이 제외합니다.
    """
    observations = []
    for log in logs:
        if log.type is not LogType.WEIGHT:
            continue
        weight = parse_weight(log.value)
        if weight is None:
            logger.warning(f"Skipping weight log {log.log_id} with unusable value {log.value!r}")
            continue
        observations.append((log.timestamp, log.sequence, weight))

    observations.sort(key=lambda item: (item[0], item[1]))
    return [
        WeightPoint(timestamp=ts, date=DateTimeUtils.to_chart_label(ts), weight=weight)
        for ts, _, weight in observations
    ]


def weight_trend(series: Sequence[WeightPoint]) -> WeightTrend:
    """
    첫 값과 마지막 값만 비교합니다. 마지막 값이 더 크면 INCREASING,
    그 외(감소 포함)는 모두 STABLE입니다. 두 점 미만이면 INSUFFICIENT_DATA.
    """
    if len(series) < 2:
        return WeightTrend.INSUFFICIENT_DATA
    if series[-1].weight - series[0].weight > 0:
        return WeightTrend.INCREASING
    return WeightTrend.STABLE
