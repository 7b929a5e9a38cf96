"""
Freivalds 데이터 직렬화/역직렬화 헬퍼
======================================

TinyDB와 JSON 응답에 저장 가능한 형태로 회로 객체를 변환한다.
FR, FR 리스트, 정수 행렬, ConstraintSystem 요약 등.
"""

from zkmatmul.r1cs.errors import ConfigurationError


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def serialize_fr_list(lst):
    """list[FR] → list[str]"""
    return [serialize_fr(v) for v in lst]


def fr_short(val):
    """FR → 축약 문자열 (UI 표시용)"""
    if val is None:
        return "None"
    s = str(int(val))
    if len(s) <= 10:
        return s
    return s[:4] + "..." + s[-4:]


# ─── 행렬 ───

def deserialize_matrix(data, name):
    """JSON 배열 → 정수 행렬.

    10진 숫자 문자열("19")도 허용한다. "²" 같은 숫자 기호는 변환하지 않으므로
    빌더 검증에서 ConfigurationError가 된다. 모양 검증도 빌더가 한다.

    Raises:
        ConfigurationError: 리스트가 아니거나 정수로 변환할 수 없는 원소
    """
    if not isinstance(data, list):
        raise ConfigurationError(f"행렬 {name}은(는) JSON 배열이어야 합니다")
    matrix = []
    for row in data:
        if not isinstance(row, list):
            raise ConfigurationError(f"행렬 {name}의 행은 JSON 배열이어야 합니다")
        parsed = []
        for value in row:
            if isinstance(value, str) and value.strip().isdecimal():
                value = int(value)
            parsed.append(value)
        matrix.append(parsed)
    return matrix


def serialize_matrix(matrix):
    """정수 또는 FR 행렬 → int 행렬"""
    return [[int(v) for v in row] for row in matrix]


# ─── ConstraintSystem ───

def serialize_constraint_system(cs):
    """ConstraintSystem → 요약 딕셔너리 (행렬 크기, 공개 입력)"""
    data = {
        "num_constraints": cs.num_constraints,
        "num_instance_variables": cs.num_instance_variables,
        "num_witness_variables": cs.num_witness_variables,
        "is_finalized": cs.is_finalized,
        "mode": cs.mode.value,
    }
    if cs.matrices is not None:
        data["a_num_non_zero"] = cs.matrices.a_num_non_zero
        data["b_num_non_zero"] = cs.matrices.b_num_non_zero
        data["c_num_non_zero"] = cs.matrices.c_num_non_zero
    if not cs.is_in_setup_mode():
        data["public_inputs"] = serialize_fr_list(cs.public_inputs())
    return data


def serialize_challenges(challenges):
    """list[list[FR]] → 라운드별 축약 문자열 리스트 (UI 표시용)"""
    return [
        {"round": i, "r": [fr_short(v) for v in r], "r_raw": serialize_fr_list(r)}
        for i, r in enumerate(challenges)
    ]
