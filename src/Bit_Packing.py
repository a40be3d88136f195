from functools import partial
from typing import BinaryIO, Iterator, List

from Hfm_Format import *

"""Упаковка битов кода Хаффмана в группы по 7 бит.

Каждый выходной байт несёт 7 бит полезной нагрузки в младших разрядах, старшим битом
вперёд, бит 7 всегда ноль. Так тело файла остаётся в диапазоне 0..127.

API:
    - BitWriter(stream): write(value, length), flush() → число бит в хвосте
    - BitReader(stream, last_byte_bits): итератор по битам тела с просмотром на байт вперёд
"""

# -------------------------------------------------------------------------------------------------

def byte_to_bits(bits: List[int], byte: int, length: int):
    """Добавляет в битовый буфер двоичное представление числа фиксированной длины.

    Args:
        bits (List[int]): Целевой буфер битов.
        byte (int): Число, из которого извлекаются биты.
        length (int): Количество записываемых бит (старшие первыми).
    """
    for i in range(length - 1, -1, -1):
        bits.append((byte >> i)&1)        # захват i-того бита

def code_to_bits(code: str) -> List[int]:
    """Преобразует строку кода из '0'/'1' в список битов."""
    return [1 if c == "1" else 0 for c in code]

# =================================================================================================================

class BitWriter:
    """Накопитель битов, выпускающий в поток по байту на каждые GROUP_BITS бит."""

    def __init__(self, stream: BinaryIO, group: int = GROUP_BITS):
        self.stream = stream
        self.group = group
        self.mask = (1 << group) - 1
        self.total_bits = 0
        self.bytes_written = 0

        self._acc = 0           # неизрасходованные биты, не более group-1 после write
        self._count = 0
        self._out = bytearray()

    def write(self, value: int, length: int):
        """Дописывает length младших бит value, старшим битом вперёд."""
        self._acc = (self._acc << length) | value
        self._count += length
        self.total_bits += length

        while self._count >= self.group:
            self._count -= self.group
            self._out.append((self._acc >> self._count) & self.mask)
        self._acc &= (1 << self._count) - 1

        if len(self._out) >= CHUNK_SIZE:
            self._drain()

    def flush(self) -> int:
        """Выписывает неполную группу, прижатую к старшим разрядам.

        Returns:
            int: Количество значимых бит в последнем байте (0 если группа была полной).
        """
        tail = self._count
        if tail:
            self._out.append((self._acc << (self.group - tail)) & self.mask)

        self._drain()
        self._acc = 0
        self._count = 0
        return tail

    def _drain(self):
        if self._out:
            self.stream.write(bytes(self._out))
            self.bytes_written += len(self._out)
            self._out.clear()

# =================================================================================================================

class BitReader:
    """Читает тело строго вперёд с буфером просмотра в один байт.

    Последний байт тела определяется тем, что просмотр следующего упёрся в конец потока.
    Из него отдаются только last_byte_bits бит, остальные биты - padding.
    """

    def __init__(self, stream: BinaryIO, last_byte_bits: int = GROUP_BITS, group: int = GROUP_BITS):
        self.stream = stream
        self.last_byte_bits = last_byte_bits
        self.group = group
        self.mask = (1 << group) - 1
        self.bytes_read = 0

    def __iter__(self) -> Iterator[int]:
        body = self._iter_bytes()

        current = next(body, None)
        while current is not None:
            following = next(body, None)        # просмотр на байт вперёд

            bits = []
            byte_to_bits(bits, current & self.mask, self.group)
            if following is None:
                bits = bits[:self.last_byte_bits]

            yield from bits
            current = following

    def _iter_bytes(self) -> Iterator[int]:
        for chunk in iter(partial(self.stream.read, CHUNK_SIZE), b""):
            self.bytes_read += len(chunk)
            yield from chunk
