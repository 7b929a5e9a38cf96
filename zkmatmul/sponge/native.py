"""
Poseidon 듀플렉스 스펀지 (네이티브)
=====================================

회로 밖에서 필드 원소를 직접 계산하는 Poseidon 스펀지.
회로 안 스펀지(gadget.PoseidonSpongeVar)는 이 클래스를 상속하여
같은 흡수/추출 규칙을 제약과 함께 재현한다.

**상태 배치** (rate=2, capacity=1):
    state = [ c₀ | r₀, r₁ ]
             용량   흡수율 셀
  입력은 흡수율 셀에 더해지고, 출력도 흡수율 셀에서 읽는다.

**듀플렉스 모드**:
  - 흡수(absorbing) 중 흡수율 셀이 가득 차면 순열 후 처음부터 다시 채운다.
  - 흡수 → 추출로 바뀔 때 항상 한 번 순열한다.
  - 추출 중 흡수율 셀을 다 읽으면 순열 후 처음부터 다시 읽는다.
  - 추출 → 흡수로 바뀔 때는 순열 없이 0번 셀부터 더한다.

**순열 (permute)**:
  R_F/2 전체 라운드 → R_P 부분 라운드 → R_F/2 전체 라운드
  각 라운드: ARK(상수 덧셈) → S-box(x^α) → MDS(행렬 곱)

사용 예시:
    >>> sponge = PoseidonSponge(poseidon_setup(FR))
    >>> sponge.absorb([FR(1), FR(2)])
    >>> r = sponge.squeeze_native_field_elements(2)
"""

ABSORBING = "absorbing"
SQUEEZING = "squeezing"


class PoseidonSponge:
    """네이티브 Poseidon 듀플렉스 스펀지.

    속성:
        config: PoseidonConfig
        state: rate + capacity개의 필드 원소
        mode: ABSORBING 또는 SQUEEZING
        next_index: 다음에 흡수/추출할 흡수율 셀 인덱스
    """

    def __init__(self, config):
        self.config = config
        self.state = [self._zero() for _ in range(config.width)]
        self.mode = ABSORBING
        self.next_index = 0

    # ── 원소 연산 훅 (회로 스펀지가 재정의) ──

    def _zero(self):
        return self.config.field(0)

    def _sbox(self, x):
        return x ** self.config.alpha

    def _coerce_input(self, element):
        return self.config.field(int(element) % self.config.field.field_modulus)

    # ── 순열 ──

    def _apply_ark(self, state, round_number):
        return [x + c for x, c in zip(state, self.config.ark[round_number])]

    def _apply_s_box(self, state, is_full_round):
        if is_full_round:
            return [self._sbox(x) for x in state]
        return [self._sbox(state[0])] + state[1:]

    def _apply_mds(self, state):
        new_state = []
        for row in self.config.mds:
            cur = self._zero()
            for x, m in zip(state, row):
                cur = cur + x * m
            new_state.append(cur)
        return new_state

    def permute(self):
        """Poseidon 순열을 상태에 적용한다."""
        full_half = self.config.full_rounds // 2
        partial_end = full_half + self.config.partial_rounds
        total = self.config.full_rounds + self.config.partial_rounds

        state = list(self.state)
        for i in range(total):
            is_full_round = i < full_half or i >= partial_end
            state = self._apply_ark(state, i)
            state = self._apply_s_box(state, is_full_round)
            state = self._apply_mds(state)
        self.state = state

    # ── 흡수 ──

    def _absorb_internal(self, rate_start_index, elements):
        rate = self.config.rate
        capacity = self.config.capacity
        remaining = list(elements)
        while True:
            # 이번 호출에서 끝낼 수 있는 경우
            if rate_start_index + len(remaining) <= rate:
                for i, element in enumerate(remaining):
                    pos = capacity + rate_start_index + i
                    self.state[pos] = self.state[pos] + element
                self.mode = ABSORBING
                self.next_index = rate_start_index + len(remaining)
                return
            # 흡수율 셀을 채우고 순열
            num_absorbed = rate - rate_start_index
            for i, element in enumerate(remaining[:num_absorbed]):
                pos = capacity + rate_start_index + i
                self.state[pos] = self.state[pos] + element
            self.permute()
            remaining = remaining[num_absorbed:]
            rate_start_index = 0

    def absorb(self, elements):
        """원소(또는 원소 리스트)를 흡수한다."""
        if not isinstance(elements, (list, tuple)):
            elements = [elements]
        elements = [self._coerce_input(e) for e in elements]
        if not elements:
            return

        if self.mode == ABSORBING:
            absorb_index = self.next_index
            if absorb_index == self.config.rate:
                self.permute()
                absorb_index = 0
        else:
            absorb_index = 0
        self._absorb_internal(absorb_index, elements)

    # ── 추출 ──

    def _squeeze_internal(self, rate_start_index, num_elements):
        rate = self.config.rate
        capacity = self.config.capacity
        output = []
        while True:
            remaining = num_elements - len(output)
            # 이번 호출에서 끝낼 수 있는 경우
            if rate_start_index + remaining <= rate:
                start = capacity + rate_start_index
                output.extend(self.state[start:start + remaining])
                self.mode = SQUEEZING
                self.next_index = rate_start_index + remaining
                return output
            num_squeezed = rate - rate_start_index
            start = capacity + rate_start_index
            output.extend(self.state[start:start + num_squeezed])
            if len(output) < num_elements:
                self.permute()
            rate_start_index = 0

    def _squeeze(self, num_elements):
        if self.mode == ABSORBING:
            self.permute()
            return self._squeeze_internal(0, num_elements)
        squeeze_index = self.next_index
        if squeeze_index == self.config.rate:
            self.permute()
            squeeze_index = 0
        return self._squeeze_internal(squeeze_index, num_elements)

    def squeeze_native_field_elements(self, num_elements):
        """num_elements개의 필드 원소를 추출한다."""
        return self._squeeze(num_elements)
