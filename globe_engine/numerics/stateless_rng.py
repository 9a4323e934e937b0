# globe_engine/numerics/stateless_rng.py
# Детерминированный "шум" без состояния: одинаковые аргументы -> одинаковое число.
# Нужен, чтобы кольцо точек вокруг региона не "дрожало" между пересборками кадра.

def u32(n: int) -> int: return n & 0xFFFFFFFF


def derive_seed(base: int, tag: str) -> int:
    """FNV-1a от тега (например, 'Europa/drought'), смешанный с базовым сидом (годом)."""
    h = 2166136261
    for b in tag.encode('utf-8'):
        h ^= b
        h = (h * 16777619) & 0xFFFFFFFF
    return (base ^ h) & 0xFFFFFFFF


def hash32(i: int, j: int, seed: int) -> int:
    h = u32(0x9E3779B9 ^ seed)
    h = u32(h ^ (i * 0x85EBCA6B) ^ (j * 0xC2B2AE35))
    # финальное перемешивание (murmur3 fmix32)
    h ^= (h >> 16); h = u32(h * 0x85EBCA6B)
    h ^= (h >> 13); h = u32(h * 0xC2B2AE35)
    h ^= (h >> 16)
    return h


def rnd01(i: int, j: int, seed: int) -> float:
    return hash32(i, j, seed) / 0xFFFFFFFF


def jitter(i: int, j: int, seed: int, span: float) -> float:
    """Симметричный шум в [-span/2, span/2]."""
    return (rnd01(i, j, seed) - 0.5) * span
