"""
Freivalds Flask Blueprint: 회로 빌드/검사 엔드포인트
======================================================

JSON 엔드포인트 (prefix: /freivalds)
  GET  /circuit        마지막 빌드 결과와 네이티브 검사 결과
  POST /build          {"k", "a", "b", "c", "mode"?} → 회로 빌드 + 만족 여부
  POST /check          {"k", "a", "b", "c"} → 네이티브 Freivalds 검사 + 챌린지
  POST /load-example   2×2 예제로 빌드
  POST /reset          저장된 결과 삭제

비공개 행렬 A, B는 DB에 저장하지 않는다. 공개 값(k, C)과 요약만 저장한다.
"""

import logging

from flask import Blueprint, jsonify, request
from tinydb import Query

from zkmatmul.r1cs.errors import ConfigurationError, SynthesisError
from zkmatmul.r1cs.constraint_system import SynthesisMode
from zkmatmul.freivalds import build
from zkmatmul.freivalds.native import derive_challenges, freivalds_check

from freivalds_serializers import (
    deserialize_matrix,
    serialize_matrix,
    serialize_constraint_system,
    serialize_challenges,
)

logger = logging.getLogger(__name__)

freivalds_bp = Blueprint('freivalds', __name__, url_prefix='/freivalds')

DATA = Query()

# DB는 app.py에서 주입
DB = None

EXAMPLE = {
    "k": 1,
    "a": [[1, 2], [3, 4]],
    "b": [[5, 6], [7, 8]],
    "c": [[19, 22], [43, 50]],
}


def init_freivalds_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    """prefix로 시작하는 모든 키를 삭제한다."""
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


# ─── 요청 파싱 ───

def parse_build_request(payload):
    """요청 본문 → (k, a, b, c)

    Raises:
        ConfigurationError: 본문 또는 k가 잘못되었을 때
    """
    if not isinstance(payload, dict):
        raise ConfigurationError("요청 본문은 JSON 객체여야 합니다")
    k = payload.get("k", 1)
    if isinstance(k, str) and k.strip().isdecimal():
        k = int(k)
    a = deserialize_matrix(payload.get("a"), "A")
    b = deserialize_matrix(payload.get("b"), "B")
    c = deserialize_matrix(payload.get("c"), "C")
    return k, a, b, c


def parse_mode(payload):
    """요청의 "mode" → SynthesisMode (기본값: prove)"""
    try:
        return SynthesisMode(payload.get("mode", SynthesisMode.PROVE.value))
    except ValueError:
        raise ConfigurationError(f"알 수 없는 합성 모드: {payload.get('mode')!r}")


def build_and_store(k, a, b, c, mode=SynthesisMode.PROVE):
    """회로를 빌드하고 요약을 DB에 저장한다."""
    cs = build(k, a, b, c, mode=mode)
    satisfied = cs.is_satisfied()
    circuit_data = {
        "k": k,
        "n": len(c),
        "c": serialize_matrix(c),
        "satisfied": satisfied,
        "unsatisfied_constraint": None if satisfied else cs.which_is_unsatisfied(),
        "constraint_system": serialize_constraint_system(cs),
    }
    db_set("freivalds.circuit.data", circuit_data)
    # 새 빌드 시 이전 네이티브 검사 결과 클리어
    db_remove_prefix("freivalds.native.")
    return circuit_data


# ─── 오류 응답 ───

@freivalds_bp.errorhandler(ConfigurationError)
def handle_configuration_error(error):
    return jsonify({"error": "configuration", "message": str(error)}), 400


@freivalds_bp.errorhandler(SynthesisError)
def handle_synthesis_error(error):
    logger.error(f"Circuit synthesis failed: {error}")
    return jsonify({"error": type(error).__name__, "message": str(error)}), 422


# ──────────────────────────────────────────────────────────────
# 엔드포인트
# ──────────────────────────────────────────────────────────────

@freivalds_bp.route("/circuit")
def circuit_page():
    """마지막 빌드/검사 결과를 반환한다."""
    return jsonify({
        "circuit": db_get("freivalds.circuit.data"),
        "check": db_get("freivalds.native.check"),
    })


@freivalds_bp.route("/build", methods=["POST"])
def circuit_build():
    """요청 행렬로 회로를 빌드한다."""
    payload = request.get_json(silent=True)
    k, a, b, c = parse_build_request(payload)
    return jsonify(build_and_store(k, a, b, c, parse_mode(payload)))


@freivalds_bp.route("/check", methods=["POST"])
def circuit_check():
    """네이티브 Freivalds 검사를 실행하고 챌린지를 반환한다."""
    k, a, b, c = parse_build_request(request.get_json(silent=True))
    challenges = derive_challenges(k, a, b, c)
    check_data = {
        "k": k,
        "passed": freivalds_check(k, a, b, c, challenges=challenges),
        "challenges": serialize_challenges(challenges),
    }
    db_set("freivalds.native.check", check_data)
    return jsonify(check_data)


@freivalds_bp.route("/load-example", methods=["POST"])
def circuit_load_example():
    """2×2 예제 (A·B = C, k = 1)로 회로를 빌드한다."""
    return jsonify(build_and_store(
        EXAMPLE["k"], EXAMPLE["a"], EXAMPLE["b"], EXAMPLE["c"]
    ))


@freivalds_bp.route("/reset", methods=["POST"])
def circuit_reset():
    """모든 Freivalds 데이터를 클리어한다."""
    db_remove_prefix("freivalds.")
    return jsonify({"circuit": None, "check": None})
