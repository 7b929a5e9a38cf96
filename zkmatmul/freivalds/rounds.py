"""
Freivalds 라운드: 무작위 행렬 곱 검사
======================================

  ┌─────────────────────────────────────────────────┐
  │  트랜스크립트 → r (길이 N)                       │
  │                                                 │
  │  br  = B · r          N² 곱셈                   │
  │  abr = A · br         N² 곱셈                   │
  │  cr  = C · r          N² 곱셈                   │
  │  강제: abr[i] == cr[i]  (i = 0..N-1)            │
  └─────────────────────────────────────────────────┘

**Freivalds 알고리즘**:
  A·B = C를 직접 확인하면 O(N³) 곱셈이 필요하다.
  대신 무작위 벡터 r에 대해 A·(B·r) = C·r만 확인하면 O(N²)이다.
  A·B ≠ C이면 무작위 r이 검사를 통과할 확률은 1/|F| 이하이고,
  k번 독립적으로 반복하면 1/|F|^k 이하로 떨어진다.

**실패 의미**:
  등식 강제는 "거짓"을 반환하지 않는다. 틀린 행렬이면 제약 시스템이
  만족 불가능해질 뿐이며, 이는 is_satisfied()에서만 드러난다.

**순서**:
  각 라운드의 r은 이전의 모든 흡수/추출에 의존하므로
  라운드는 반드시 순서대로 실행해야 한다.

사용:
    이 모듈은 직접 호출하지 않고, freivalds.build()를 통해 실행된다.
"""

from zkmatmul.r1cs.fp_var import FpVar


def matrix_vector_product(matrix, vector, field):
    """회로 안 행렬-벡터 곱: result[i] = Σ_j matrix[i][j] · vector[j].

    Args:
        matrix: FpVar 행렬
        vector: FpVar 벡터
        field: 필드 클래스

    Returns:
        list[FpVar]: 곱 벡터 (변수끼리의 곱마다 제약 1개)
    """
    result = []
    for row in matrix:
        acc = FpVar.zero(field)
        for entry, x in zip(row, vector):
            acc = acc + entry * x
        result.append(acc)
    return result


def execute(state, round_index):
    """Freivalds 라운드 하나를 실행한다.

    Args:
        state: BuilderState (transcript, a_vars, b_vars, c_vars를 읽는다)
        round_index: 라운드 번호 (제약 이름에 사용)
    """
    field = state.cs.field

    # ── 1. 챌린지 벡터 r: 원소마다 한 번씩 추출 ──
    r = []
    for _ in range(state.n):
        r.extend(state.transcript.squeeze_field_elements(1))

    # ── 2~4. B·r, A·(B·r), C·r ──
    br = matrix_vector_product(state.b_vars, r, field)
    abr = matrix_vector_product(state.a_vars, br, field)
    cr = matrix_vector_product(state.c_vars, r, field)

    # ── 5. A·(B·r) == C·r ──
    for i in range(state.n):
        abr[i].enforce_equal(cr[i], label=f"freivalds round {round_index} row {i}")
