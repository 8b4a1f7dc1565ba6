import numpy as np

from .errors import DivideByZero, InvalidArgument
from .utils import LIMB_BITS, LIMB_MASK, empty_limbs, limbs_to_int

_MASK64 = np.uint64(LIMB_MASK)
_HALF_MASK64 = np.uint64(0xFFFF)

# キャリー状態: 0=Kill, 1=Propagate, 2=Generate
_KILL, _PROPAGATE, _GENERATE = 0, 1, 2


class LimbArithmetic:
    """符号なし多倍長整数 (uint32 Limb配列, Little-endian) の演算

    すべての入力は末尾のゼロLimbを持たない正規形であること。
    出力は常に新しく確保された配列で、入力と記憶領域を共有しない。
    """

    def __init__(self, max_bits=1000000):
        self.max_bits = max_bits

    def _resolve_carries(self, states):
        """Hillis-Steele スキャンで O(log N) ステップでキャリーを確定させる"""
        n = states.size

        # ステップ幅を 1, 2, 4, 8... と倍にしながらスキャン
        # 右の要素がPropagate(1)なら左の要素の状態を引き継ぐ
        step = 1
        while step < n:
            states[step:] = np.where(states[step:] == _PROPAGATE,
                                     states[:-step], states[step:])
            step *= 2
        return states

    def _align(self, a, b):
        n = max(len(a), len(b))
        a_out = np.zeros(n, dtype=np.uint32)
        b_out = np.zeros(n, dtype=np.uint32)
        a_out[:len(a)] = a
        b_out[:len(b)] = b
        return a_out, b_out

    def _align_and_get_states(self, a_limbs, b_limbs, mode='add'):
        a, b = self._align(a_limbs, b_limbs)

        if mode == 'add':
            sum64 = a.astype(np.uint64) + b.astype(np.uint64)
            states = np.where(sum64 > LIMB_MASK, _GENERATE,
                              np.where(sum64 == LIMB_MASK, _PROPAGATE, _KILL)).astype(np.int32)
            return states, (sum64 & _MASK64).astype(np.uint32)
        else:
            diff64 = a.astype(np.int64) - b.astype(np.int64)
            states = np.where(diff64 < 0, _GENERATE,
                              np.where(diff64 == 0, _PROPAGATE, _KILL)).astype(np.int32)
            return states, (diff64 & LIMB_MASK).astype(np.uint32)

    def add(self, a, b):
        if len(a) == 0 and len(b) == 0:
            return empty_limbs()
        states, base_res = self._align_and_get_states(a, b, 'add')
        resolved = self._resolve_carries(states)

        actual_carries = np.zeros(len(states), dtype=np.uint32)
        if len(states) > 1:
            actual_carries[1:] = (resolved[:-1] == _GENERATE).astype(np.uint32)

        res = base_res + actual_carries
        if resolved[-1] == _GENERATE:
            res = np.concatenate([res, np.array([1], dtype=np.uint32)])
        return self._trim(res)

    def sub(self, a, b):
        """a - b (a >= b であること)"""
        if len(a) == 0 and len(b) == 0:
            return empty_limbs()
        states, base_res = self._align_and_get_states(a, b, 'sub')
        resolved = self._resolve_carries(states)

        actual_borrows = np.zeros(len(states), dtype=np.uint32)
        if len(states) > 1:
            actual_borrows[1:] = (resolved[:-1] == _GENERATE).astype(np.uint32)

        res = base_res - actual_borrows
        return self._trim(res)

    def mul(self, a, b):
        """筆算による乗算 (16bit half-limb 単位で部分積を uint64 に蓄積)"""
        if len(a) == 0 or len(b) == 0:
            return empty_limbs()
        a16 = self._split_to_uint16(a)
        b16 = self._split_to_uint16(b)
        if len(b16) > len(a16):
            a16, b16 = b16, a16

        n_a = len(a16)
        n_out = n_a + len(b16)
        wide_a = a16.astype(np.uint64)

        result = np.zeros(n_out, dtype=np.uint64)
        for j, digit in enumerate(b16.tolist()):
            if digit:
                result[j:j + n_a] += wide_a * np.uint64(digit)

        while True:
            carries = result >> np.uint64(16)
            result = result & _HALF_MASK64
            if not carries.any():
                break
            result[1:] += carries[:-1]

        return self._trim(self._combine_from_uint16(result.astype(np.uint16)))

    def divmod(self, a, b):
        """切り捨て除算 (商, 余り) を返す"""
        if len(b) == 0:
            raise DivideByZero(limbs_to_int(a))
        if self.compare(a, b) < 0:
            return empty_limbs(), a.copy()
        if len(b) == 1:
            return self._divmod_word(a, int(b[0]))
        return self._divmod_long(a, b)

    def _divmod_word(self, a, d):
        rem = 0
        quotient = []
        for limb in reversed(a.tolist()):
            q, rem = divmod((rem << LIMB_BITS) | limb, d)
            quotient.append(q)
        q_limbs = np.array(quotient[::-1], dtype=np.uint32)
        return self._trim(q_limbs), self._trim(np.array([rem], dtype=np.uint32))

    def _divmod_long(self, a, b):
        """Knuth Algorithm D (除数を正規化してから1 Limbずつ商を推定)"""
        n = len(b)
        m = len(a) - n
        shift = LIMB_BITS - int(b[-1]).bit_length()
        v = self._shift_left(b, shift)
        u = np.zeros(len(a) + 1, dtype=np.uint32)
        shifted = self._shift_left(a, shift)
        u[:len(shifted)] = shifted

        radix = 1 << LIMB_BITS
        v_top = int(v[-1])
        v_next = int(v[-2])
        quotient = np.zeros(m + 1, dtype=np.uint32)

        for j in range(m, -1, -1):
            top = (int(u[j + n]) << LIMB_BITS) | int(u[j + n - 1])
            qhat, rhat = divmod(top, v_top)
            while qhat >= radix or qhat * v_next > ((rhat << LIMB_BITS) | int(u[j + n - 2])):
                qhat -= 1
                rhat += v_top
                if rhat >= radix:
                    break
            qhat = min(qhat, radix - 1)

            window = self._trim(u[j:j + n + 1].copy())
            prod = self.mul(v, np.array([qhat], dtype=np.uint32))
            # 推定値は高々2だけ大きい
            while self.compare(prod, window) > 0:
                qhat -= 1
                prod = self.sub(prod, v)
            diff = self.sub(window, prod)
            u[j:j + n + 1] = 0
            u[j:j + len(diff)] = diff
            quotient[j] = qhat

        remainder = self.shr(self._trim(u[:n].copy()), shift)
        return self._trim(quotient), remainder

    def compare(self, a, b):
        if len(a) != len(b):
            return 1 if len(a) > len(b) else -1
        diff = np.flatnonzero(a != b)
        if diff.size == 0:
            return 0
        i = int(diff[-1])
        return 1 if a[i] > b[i] else -1

    def bit_and(self, a, b):
        a, b = self._align(a, b)
        return self._trim(a & b)

    def bit_or(self, a, b):
        a, b = self._align(a, b)
        return self._trim(a | b)

    def bit_xor(self, a, b):
        a, b = self._align(a, b)
        return self._trim(a ^ b)

    def bit_length(self, a):
        if len(a) == 0:
            return 0
        return (len(a) - 1) * LIMB_BITS + int(a[-1]).bit_length()

    def shl(self, a, n):
        if n < 0:
            raise InvalidArgument("shift count", n)
        if len(a) and self.bit_length(a) + n > self.max_bits:
            raise InvalidArgument("shift count", n)
        return self._shift_left(a, n)

    def _shift_left(self, a, n):
        if len(a) == 0:
            return empty_limbs()
        words, bits = divmod(n, LIMB_BITS)
        wide = a.astype(np.uint64) << np.uint64(bits)
        res = np.zeros(len(a) + words + 1, dtype=np.uint32)
        res[words:words + len(a)] = (wide & _MASK64).astype(np.uint32)
        res[words + 1:words + 1 + len(a)] |= (wide >> np.uint64(LIMB_BITS)).astype(np.uint32)
        return self._trim(res)

    def shr(self, a, n):
        if n < 0:
            raise InvalidArgument("shift count", n)
        words, bits = divmod(n, LIMB_BITS)
        if words >= len(a):
            return empty_limbs()
        src = a[words:].astype(np.uint64)
        low = src >> np.uint64(bits)
        if bits:
            low[:-1] |= (src[1:] << np.uint64(LIMB_BITS - bits)) & _MASK64
        return self._trim(low.astype(np.uint32))

    def _split_to_uint16(self, arr):
        """uint32 limb配列をuint16 half-limb配列に分割 (little-endian)"""
        low = (arr & np.uint32(0xFFFF)).astype(np.uint16)
        high = (arr >> np.uint32(16)).astype(np.uint16)
        result = np.empty(len(arr) * 2, dtype=np.uint16)
        result[0::2] = low
        result[1::2] = high
        return result

    def _combine_from_uint16(self, arr):
        """uint16 half-limb配列をuint32 limb配列に結合"""
        if len(arr) % 2 == 1:
            arr = np.concatenate([arr, np.array([0], dtype=np.uint16)])
        low = arr[0::2].astype(np.uint32)
        high = arr[1::2].astype(np.uint32)
        return low | (high << np.uint32(16))

    def _trim(self, arr):
        nonzero = np.flatnonzero(arr)
        if nonzero.size == 0:
            return empty_limbs()
        return arr[:int(nonzero[-1]) + 1]
