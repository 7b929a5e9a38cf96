"""
Poseidon 상수 생성용 Grain LFSR
=================================

Poseidon 논문의 표준 상수 생성 절차에서 사용하는 80비트 Grain LFSR.
라운드 상수(ARK)와 MDS 행렬을 "아무것도 숨기지 않은(nothing-up-my-sleeve)"
방식으로 결정론적으로 뽑아낸다.

**초기 상태 (80비트)**:
  | 비트        | 내용                                   |
  |-------------|----------------------------------------|
  | b0, b1      | 필드 종류 (소수체 → 0, 1)              |
  | b2 ~ b5     | S-box 종류 (x^α → 0, 역원 → b5 = 1)    |
  | b6 ~ b17    | 필드 비트 크기 n                        |
  | b18 ~ b29   | 상태 너비 t (= rate + capacity)        |
  | b30 ~ b39   | 전체 라운드 수 R_F                      |
  | b40 ~ b49   | 부분 라운드 수 R_P                      |
  | b50 ~ b79   | 모두 1                                 |

**갱신 규칙**:
  b_{i+80} = b_{i+62} ⊕ b_{i+51} ⊕ b_{i+38} ⊕ b_{i+23} ⊕ b_{i+13} ⊕ b_i
  초기화 직후 160비트를 버린다.

**출력 (self-shrinking)**:
  비트를 두 개씩 뽑아, 첫 비트가 1이면 두 번째 비트를 출력하고
  0이면 두 번째 비트를 버린다.

사용 예시:
    >>> lfsr = PoseidonGrainLFSR(False, 254, 3, 8, 57)
    >>> ark_row = lfsr.get_field_elements_rejection_sampling(FR, 3)
"""


class PoseidonGrainLFSR:
    """Poseidon 상수 생성기.

    속성:
        prime_num_bits: 필드 비트 크기 n
        state: 80개의 bool 리스트 (순환 버퍼)
        head: 순환 버퍼의 현재 시작 위치
    """

    STATE_SIZE = 80

    def __init__(self, is_sbox_an_inverse, prime_num_bits, state_len,
                 num_full_rounds, num_partial_rounds):
        self.prime_num_bits = prime_num_bits
        self.head = 0

        state = [False] * self.STATE_SIZE
        # b0, b1: 소수체
        state[1] = True
        # b2 ~ b5: S-box
        state[5] = bool(is_sbox_an_inverse)
        # b6 ~ b17, b18 ~ b29, b30 ~ b39, b40 ~ b49: 빅엔디안 이진 표현
        self._write_bits(state, 6, 17, prime_num_bits)
        self._write_bits(state, 18, 29, state_len)
        self._write_bits(state, 30, 39, num_full_rounds)
        self._write_bits(state, 40, 49, num_partial_rounds)
        # b50 ~ b79: 1
        for i in range(50, self.STATE_SIZE):
            state[i] = True
        self.state = state

        # 초기 160비트 폐기
        for _ in range(160):
            self._update()

    @staticmethod
    def _write_bits(state, first, last, value):
        for i in range(last, first - 1, -1):
            state[i] = value & 1 == 1
            value >>= 1

    def _update(self):
        s = self.state
        h = self.head
        new_bit = (
            s[(h + 62) % 80]
            ^ s[(h + 51) % 80]
            ^ s[(h + 38) % 80]
            ^ s[(h + 23) % 80]
            ^ s[(h + 13) % 80]
            ^ s[h]
        )
        s[h] = new_bit
        self.head = (h + 1) % 80
        return new_bit

    def get_bits(self, num_bits):
        """self-shrinking 규칙으로 num_bits개의 출력 비트를 생성한다."""
        bits = []
        for _ in range(num_bits):
            first = self._update()
            while not first:
                # 두 번째 비트를 버리고 다시 첫 비트를 뽑는다
                self._update()
                first = self._update()
            bits.append(self._update())
        return bits

    def _next_integer(self):
        # 먼저 나온 비트가 최상위 비트(MSB)
        value = 0
        for bit in self.get_bits(self.prime_num_bits):
            value = (value << 1) | int(bit)
        return value

    def get_field_elements_rejection_sampling(self, field, num_elems):
        """거부 샘플링: 위수 이상인 값은 버리고 다시 뽑는다 (라운드 상수용)."""
        self._check_field(field)
        elements = []
        for _ in range(num_elems):
            while True:
                value = self._next_integer()
                if value < field.field_modulus:
                    elements.append(field(value))
                    break
        return elements

    def get_field_elements_mod_p(self, field, num_elems):
        """모듈러 축소: 뽑은 값을 위수로 나눈 나머지 (MDS 행렬용)."""
        self._check_field(field)
        return [field(self._next_integer() % field.field_modulus) for _ in range(num_elems)]

    def _check_field(self, field):
        if field.field_modulus.bit_length() != self.prime_num_bits:
            raise ValueError(
                f"필드 비트 크기 {field.field_modulus.bit_length()}가 "
                f"LFSR 설정 {self.prime_num_bits}와 다릅니다"
            )
