"""
    주문 도메인 예외

    서비스 레이어에서 발생시키고 엔드포인트에서 HTTPException으로 변환합니다.
"""


class OrderWorkflowError(Exception):
    """주문 처리 오류 기본 클래스"""
    status_code = 500


class EmptySelectionError(OrderWorkflowError, ValueError):
    """선택된 주문이 없음"""
    status_code = 400

    def __init__(self, message: str = "선택된 주문이 없습니다."):
        super().__init__(message)


class OrderNotFoundError(OrderWorkflowError, LookupError):
    """주문을 찾을 수 없음"""
    status_code = 404

    def __init__(self, message: str = "주문을 찾을 수 없습니다."):
        super().__init__(message)


class InvalidTransitionError(OrderWorkflowError, ValueError):
    """허용되지 않은 상담 상태 전이"""
    status_code = 409

    def __init__(self, source: str, target: str):
        self.source = source
        self.target = target
        super().__init__(f"'{source}' 상태에서 '{target}' 상태로 이동할 수 없습니다.")


class OrderValidationError(OrderWorkflowError, ValueError):
    """필수 입력값 누락 등 쓰기 전 검증 실패"""
    status_code = 400


class ShippingInfoError(OrderValidationError):
    """배송 정보(택배사/송장번호/연락처) 누락"""


class ExternalServiceError(OrderWorkflowError):
    """외부 API(알림톡, 결제) 호출 실패"""
    status_code = 502


class PaymentCancelError(ExternalServiceError):
    """결제 취소 실패"""


class NotificationError(OrderWorkflowError):
    """알림톡 발송 실패"""
    status_code = 500
