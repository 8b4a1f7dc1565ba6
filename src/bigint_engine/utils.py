import numpy as np

LIMB_BITS = 32
LIMB_MASK = 0xFFFFFFFF
CELL_BITS = 32


def empty_limbs() -> np.ndarray:
    return np.zeros(0, dtype=np.uint32)


def int_to_limbs(n: int) -> np.ndarray:
    """Pythonの整数の絶対値をLimb配列(uint32, Little-endian)に変換"""
    if n == 0:
        return empty_limbs()

    # 16進数経由で変換 (巨大整数の場合、これが最も効率的)
    hex_s = hex(abs(n))[2:]
    # 8文字(32bit)単位にパディング
    pad_len = (8 - len(hex_s) % 8) % 8
    hex_s = hex_s.zfill(len(hex_s) + pad_len)

    limbs = [int(hex_s[i:i+8], 16) for i in range(0, len(hex_s), 8)]
    # Little-endianにするため逆転
    return np.array(limbs[::-1], dtype=np.uint32)


def limbs_to_int(limbs: np.ndarray) -> int:
    """Limb配列をPythonの整数に変換"""
    out = 0
    for i, val in enumerate(limbs.tolist()):
        out |= int(val) << (i * LIMB_BITS)
    return out


def wrap_to_cell(limbs: np.ndarray, negative: bool, bits: int = CELL_BITS) -> int:
    """下位 bits ビットを取り出し、符号を付けて bits 幅の符号付き整数に丸める"""
    n_limbs = (bits + LIMB_BITS - 1) // LIMB_BITS
    low = limbs_to_int(limbs[:n_limbs]) & ((1 << bits) - 1)
    if negative:
        low = -low
    half = 1 << (bits - 1)
    return ((low + half) % (1 << bits)) - half
