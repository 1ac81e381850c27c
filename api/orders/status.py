"""
    상담 상태 정의 및 전이 그래프

    주문의 consultation_status가 이동할 수 있는 경로를 정의합니다.
    워크플로우 서비스는 이 그래프에 없는 전이를 쓰기 전에 거부합니다.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class ConsultationStatus(str, Enum):
    """상담 상태 (7개 고정)"""
    CHATTING_REQUIRED = "chatting_required"               # 접수 필요
    CONSULTATION_REQUIRED = "consultation_required"       # 상담 필요
    ON_HOLD = "on_hold"                                   # 보류
    CONSULTATION_COMPLETED = "consultation_completed"     # 배송필요(상담완료)
    SHIPPING_ON_HOLD = "shipping_on_hold"                 # 배송보류
    SHIPPED = "shipped"                                   # 배송처리
    CANCELLED = "cancelled"                               # 취소건


# 배송 준비 버킷
READY_TO_SHIP = ConsultationStatus.CONSULTATION_COMPLETED

STATUS_LABELS: Dict[ConsultationStatus, str] = {
    ConsultationStatus.CHATTING_REQUIRED: "접수 필요",
    ConsultationStatus.CONSULTATION_REQUIRED: "상담 필요",
    ConsultationStatus.ON_HOLD: "보류",
    ConsultationStatus.CONSULTATION_COMPLETED: "배송필요(상담완료)",
    ConsultationStatus.SHIPPING_ON_HOLD: "배송보류",
    ConsultationStatus.SHIPPED: "배송처리",
    ConsultationStatus.CANCELLED: "취소건",
}

# 전이 그래프: 현재 상태 -> 이동 가능한 상태들
# cancelled로 들어오는 간선은 없음 (결제 취소 처리에서만 설정)
ALLOWED_TRANSITIONS: Dict[ConsultationStatus, FrozenSet[ConsultationStatus]] = {
    ConsultationStatus.CHATTING_REQUIRED: frozenset({
        ConsultationStatus.CONSULTATION_REQUIRED,
        ConsultationStatus.CONSULTATION_COMPLETED,
    }),
    ConsultationStatus.CONSULTATION_REQUIRED: frozenset({
        ConsultationStatus.CONSULTATION_COMPLETED,
        ConsultationStatus.ON_HOLD,
        ConsultationStatus.SHIPPING_ON_HOLD,
        ConsultationStatus.CHATTING_REQUIRED,
    }),
    ConsultationStatus.ON_HOLD: frozenset({
        ConsultationStatus.CONSULTATION_COMPLETED,
        ConsultationStatus.SHIPPING_ON_HOLD,
    }),
    ConsultationStatus.SHIPPING_ON_HOLD: frozenset({
        ConsultationStatus.SHIPPED,
        ConsultationStatus.CONSULTATION_COMPLETED,
    }),
    ConsultationStatus.CONSULTATION_COMPLETED: frozenset({
        ConsultationStatus.SHIPPED,
        ConsultationStatus.CONSULTATION_REQUIRED,
        ConsultationStatus.SHIPPING_ON_HOLD,
    }),
    ConsultationStatus.SHIPPED: frozenset({
        ConsultationStatus.CONSULTATION_COMPLETED,
    }),
    ConsultationStatus.CANCELLED: frozenset(),
}


def is_allowed_transition(source: ConsultationStatus, target: ConsultationStatus) -> bool:
    """
    source -> target 전이 허용 여부

    같은 상태로의 전이는 멱등 쓰기로 취급하여 허용합니다.
    """
    if source == target:
        return True

    return target in ALLOWED_TRANSITIONS.get(source, frozenset())


# ============================================================================
# 주문 상세 화면 이동 버튼 테이블 (현재 상태 -> 이전/다음/추가 이동)
# ============================================================================

STATUS_FLOW: Dict[ConsultationStatus, Dict] = {
    ConsultationStatus.CHATTING_REQUIRED: {
        "next": ConsultationStatus.CONSULTATION_REQUIRED,
        "next_label": "상담 필요로 이동",
        "extra_actions": [
            (ConsultationStatus.CONSULTATION_COMPLETED, "배송필요(상담완료)"),
        ],
    },
    ConsultationStatus.CONSULTATION_REQUIRED: {
        "next": ConsultationStatus.CONSULTATION_COMPLETED,
        "next_label": "배송필요(상담완료)",
        "extra_actions": [
            (ConsultationStatus.ON_HOLD, "보류로 이동"),
            (ConsultationStatus.SHIPPING_ON_HOLD, "배송 보류"),
            (ConsultationStatus.CHATTING_REQUIRED, "접수 필요로 이동"),
        ],
    },
    ConsultationStatus.ON_HOLD: {
        "next": ConsultationStatus.CONSULTATION_COMPLETED,
        "next_label": "배송필요(상담완료)",
        "extra_actions": [
            (ConsultationStatus.SHIPPING_ON_HOLD, "배송보류"),
        ],
    },
    ConsultationStatus.CONSULTATION_COMPLETED: {
        "prev": ConsultationStatus.CONSULTATION_REQUIRED,
        "prev_label": "상담 필요로 이동",
        "next": ConsultationStatus.SHIPPED,
        "next_label": "배송처리",
        "extra_actions": [
            (ConsultationStatus.SHIPPING_ON_HOLD, "배송보류로 이동"),
        ],
    },
    ConsultationStatus.SHIPPING_ON_HOLD: {
        "prev": ConsultationStatus.CONSULTATION_COMPLETED,
        "prev_label": "배송필요(상담완료)로 이동",
        "next": ConsultationStatus.SHIPPED,
        "next_label": "배송처리",
    },
    ConsultationStatus.SHIPPED: {
        "prev": ConsultationStatus.CONSULTATION_COMPLETED,
        "prev_label": "배송필요(상담완료)로 이동",
    },
    ConsultationStatus.CANCELLED: {},
}


def get_status_label(status: str) -> str:
    try:
        return STATUS_LABELS[ConsultationStatus(status)]
    except ValueError:
        return status


def get_status_actions(status: ConsultationStatus) -> Dict[str, Optional[object]]:
    """현재 상태에서 보여줄 이동 버튼 정보 (표시용)"""
    flow = STATUS_FLOW.get(status, {})

    extra_actions: List[Dict[str, str]] = [
        {"target": target.value, "label": label}
        for target, label in flow.get("extra_actions", [])
    ]

    prev_status = flow.get("prev")
    next_status = flow.get("next")

    return {
        "current": status.value,
        "current_label": STATUS_LABELS[status],
        "prev": prev_status.value if prev_status else None,
        "prev_label": flow.get("prev_label"),
        "next": next_status.value if next_status else None,
        "next_label": flow.get("next_label"),
        "extra_actions": extra_actions,
    }
