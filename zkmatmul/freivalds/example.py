"""
Freivalds 회로 데모: A·B = C (2×2)
====================================

이 스크립트는 행렬 곱 회로 구성의 전체 흐름을 시연한다.

실행:
    python -m zkmatmul.freivalds.example

흐름:
    1. 행렬 준비 (A, B 비공개 / C 공개)
    2. 네이티브 챌린지 도출 (Fiat-Shamir)
    3. 회로 구성 (k = 1)
    4. 만족 여부 확인
    5. 조작된 C로 다시 확인
"""

from zkmatmul.freivalds import build
from zkmatmul.freivalds.native import derive_challenges, freivalds_check


A = [[1, 2], [3, 4]]
B = [[5, 6], [7, 8]]
C = [[19, 22], [43, 50]]


def main():
    print("=" * 60)
    print("  Freivalds Matrix Product Circuit Demo")
    print("  A·B = C (2×2), k = 1")
    print("=" * 60)

    # ── 1. 행렬 ──
    print("\n[1] 행렬 준비...")
    print(f"    A (비공개): {A}")
    print(f"    B (비공개): {B}")
    print(f"    C (공개):   {C}")

    # ── 2. 챌린지 ──
    print("\n[2] 트랜스크립트 챌린지 도출 (Poseidon)...")
    (r,) = derive_challenges(1, A, B, C)
    for i, value in enumerate(r):
        print(f"    r[{i}] = {int(value)}")

    # ── 3. 회로 구성 ──
    print("\n[3] 회로 구성...")
    cs = build(1, A, B, C)
    print(f"    제약 수: {cs.num_constraints}")
    print(f"    공개 변수 수: {cs.num_instance_variables} (상수 1 포함)")
    print(f"    위트니스 변수 수: {cs.num_witness_variables}")
    print(f"    공개 입력: {[int(x) for x in cs.public_inputs()]}")

    # ── 4. 만족 여부 ──
    print("\n[4] 만족 여부 확인...")
    result = cs.is_satisfied()
    print(f"    회로: {'만족 ✓' if result else '불만족 ✗'}")
    print(f"    네이티브 검사: {'통과 ✓' if freivalds_check(1, A, B, C) else '실패 ✗'}")

    # ── 5. 조작된 C ──
    print("\n[5] 조작된 C로 확인 (C[0][0] = 20)...")
    fake_c = [[20, 22], [43, 50]]
    fake_cs = build(1, A, B, fake_c)
    wrong_result = fake_cs.is_satisfied()
    print(f"    회로: {'만족 ✓' if wrong_result else '불만족 ✗ (예상대로 실패)'}")
    print(f"    처음 실패한 제약: {fake_cs.which_is_unsatisfied()}")

    print("\n" + "=" * 60)
    if result and not wrong_result:
        print("  데모 완료: 모든 테스트 통과!")
    else:
        print("  데모 완료: 일부 테스트 실패")
    print("=" * 60)

    return result


if __name__ == "__main__":
    main()
