import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkmatmul.r1cs.field import FR
from zkmatmul.sponge.params import poseidon_setup


# ── 테스트 상수 ──
EXAMPLE_A = [[1, 2], [3, 4]]
EXAMPLE_B = [[5, 6], [7, 8]]
EXAMPLE_C = [[19, 22], [43, 50]]
TAMPERED_C = [[20, 22], [43, 50]]


@pytest.fixture(scope="session")
def poseidon_config():
    """bn128 스칼라 필드 Poseidon 파라미터 (세션 당 1회 생성)"""
    return poseidon_setup(FR)


@pytest.fixture
def example_matrices():
    """2×2 예제: A·B = C"""
    return EXAMPLE_A, EXAMPLE_B, EXAMPLE_C


@pytest.fixture
def tampered_matrices():
    """2×2 예제에서 C[0][0]만 바꾼 잘못된 곱"""
    return EXAMPLE_A, EXAMPLE_B, TAMPERED_C
