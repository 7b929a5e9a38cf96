"""
회로 합성(synthesis) 오류 정의
================================

회로 구성 중 발생할 수 있는 오류는 모두 호출자에게 그대로 전파된다.
내부에서 복구하거나 재시도하지 않는다.

  | 오류                | 의미                                          |
  |---------------------|-----------------------------------------------|
  | SynthesisError      | 제약/값을 생성할 수 없음 (기본 클래스)         |
  | AllocationError     | 변수를 제약 시스템에 바인딩할 수 없음          |
  | AssignmentMissing   | 구체적인 값이 필요하지만 사용할 수 없음        |
  | ConfigurationError  | 잘못된 빌드 설정 (k < 1, 행렬 크기 불일치 등)  |

틀린 행렬 곱(A·B ≠ C)은 오류가 아니다. 만족 불가능한 제약 시스템이
만들어질 뿐이며, is_satisfied()로만 확인할 수 있다.
"""


class SynthesisError(Exception):
    """제약 합성 중 발생한 오류."""


class AllocationError(SynthesisError):
    """변수 할당 실패: 제약 시스템이 새 변수를 받을 수 없는 상태."""


class AssignmentMissing(SynthesisError):
    """값 할당 누락: 형태(shape)만 구성하는 모드에서 값이 요구됨."""


class ConfigurationError(ValueError):
    """빌드 설정 오류: 제약을 만들기 전에 검출된다."""
