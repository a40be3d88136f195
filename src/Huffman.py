import logging
from collections import Counter
from dataclasses import dataclass
from functools import partial
from typing import BinaryIO, Dict, List, Optional, Union

from Hfm_Errors import *
from Hfm_Format import *
from Min_Heap import MinHeap
from Bit_Packing import *

"""Статический кодек Хаффмана для файлов .hfm.

Поддерживает:
    - подсчёт частот по алфавиту из не более чем 128 различных байтов
    - построение дерева Хаффмана на собственной min-куче
    - назначение кодов обходом дерева в глубину
    - упаковку кодов в группы по 7 бит и запись заголовка .hfm
    - восстановление дерева по сохранённой кодовой таблице и декодирование

Атрибуты:
    freqs (Dict[int,int]): Частоты символов в порядке первого появления.
    root (Leaf | Internal): Корень дерева текущего вызова.
    code_table (List[CodeEntry]): Кодовая таблица (символ, код).

API:
    - Huffman(): класс с методами compress/decompress над открытыми бинарными потоками.
    - compress(input, output) / decompress(input, output)
"""

log = logging.getLogger(__name__)

# =================================================================================================================

@dataclass
class Leaf:
    symbol: int
    freq: int = 0

@dataclass(eq=False)
class Internal:
    left: Optional["Node"] = None
    right: Optional["Node"] = None
    freq: int = 0

Node = Union[Leaf, Internal]

# =================================================================================================================

class Huffman:
# -------------------------------------------------------------------------------------------------

    def __init__(self):
        """Инициализирует локальные СД
        """
        self.freqs: Dict[int, int] = dict()
        self.root: Optional[Node] = None
        self.code_table: List[CodeEntry] = []
        self.header: Optional[HfmHeader] = None

# -------------------------------------------------------------------------------------------------

    def compress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> HfmHeader:
        """Сжимает входной поток в формат .hfm.

        Вход читается дважды: для подсчёта частот и для кодирования. Выход должен
        поддерживать seek: первая строка заголовка перезаписывается в конце.

        Args:
            input_stream (BinaryIO): Поток исходных данных.
            output_stream (BinaryIO): Поток для записи .hfm.

        Returns:
            HfmHeader: Записанный заголовок.

        Raises:
            AlphabetOverflow, EmptyInput, IoFailure
        """
        try:
            return self._compress(input_stream, output_stream)
        except OSError as e:
            raise IoFailure(f"Ошибка ввода-вывода при сжатии: {e}") from e

    def decompress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> HfmHeader:
        """Восстанавливает исходные данные из потока .hfm.

        Args:
            input_stream (BinaryIO): Поток .hfm, позиция - начало заголовка.
            output_stream (BinaryIO): Поток для восстановленных данных.

        Returns:
            HfmHeader: Прочитанный заголовок.

        Raises:
            MalformedHeader, CorruptCodeTable, IoFailure
        """
        try:
            return self._decompress(input_stream, output_stream)
        except OSError as e:
            raise IoFailure(f"Ошибка ввода-вывода при распаковке: {e}") from e

# -------------------------------------------------------------------------------------------------

    def _compress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> HfmHeader:
        origin = input_stream.tell()
        header_offset = output_stream.tell()

        self.freqs = self._count_symbols(input_stream)
        self.root = self._build_tree()
        self.code_table = self._assign_codes(self.root)

        # Заглушка '0' в первой строке, реальное значение известно только после упаковки
        self.header = HfmHeader(code_table=self.code_table)
        output_stream.write(self.header.to_bytes())

        codes = {entry.symbol: (entry.value, entry.length) for entry in self.code_table}
        writer = BitWriter(output_stream)

        input_stream.seek(origin)
        for chunk in iter(partial(input_stream.read, CHUNK_SIZE), b""):
            for b in chunk:
                writer.write(*codes[b])

        tail = writer.flush()
        if tail:
            self.header.final_bits = tail + 1
            self.header.write_final_bits(output_stream, header_offset)

        log.debug("Packed %d bits into %d bytes, final bits field = %d",
                  writer.total_bits, writer.bytes_written, self.header.final_bits)
        return self.header

    def _decompress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> HfmHeader:
        # Фаза 1: заголовок читается один раз и кэшируется
        self.header = HfmHeader.from_stream(input_stream)
        self.code_table = self.header.code_table
        self.root = self._rebuild_tree(self.code_table)

        log.debug("Header: final bits = %d, symbols = %d",
                  self.header.final_bits, self.header.symbol_count)

        # Фаза 2: тело читается строго вперёд
        out = bytearray()
        node = self.root
        for bit in BitReader(input_stream, self.header.last_byte_bits):
            node = node.right if bit else node.left
            if node is None:
                raise CorruptCodeTable("Тело содержит код, отсутствующий в кодовой таблице")

            if isinstance(node, Leaf):
                out.append(node.symbol)
                node = self.root

                if len(out) >= CHUNK_SIZE:
                    output_stream.write(bytes(out))
                    out.clear()

        output_stream.write(bytes(out))

        if node is not self.root:
            log.warning("Тело заканчивается посреди кода: хвостовые биты отброшены")

        return self.header

# -------------------------------------------------------------------------------------------------

    def _count_symbols(self, stream: BinaryIO) -> Dict[int, int]:
        """Подсчитывает частоты байтов до конца потока.

        Порядок ключей - порядок первого появления символа. Поток остаётся в конце.

        Raises:
            AlphabetOverflow: Если различных байтов больше ALPHABET_SIZE.
        """
        freqs = Counter()
        for chunk in iter(partial(stream.read, CHUNK_SIZE), b""):
            freqs.update(chunk)
            if len(freqs) > ALPHABET_SIZE:
                raise AlphabetOverflow(f"Во входных данных больше {ALPHABET_SIZE} различных байтов")

        log.debug("Counted %d distinct symbols in %d bytes", len(freqs), sum(freqs.values()))
        return dict(freqs)

    def _build_tree(self) -> Node:
        """Строит классическое дерево Хаффмана по self.freqs.

        Пока в куче больше одного узла, два минимальных (левый - извлечённый первым)
        объединяются в новый внутренний узел, который возвращается в кучу.

        Raises:
            EmptyInput: Если частоты не заданы.
        """

        # Входной файл пуст
        if not self.freqs:
            raise EmptyInput("Входной поток пуст: нечего сжимать")

        heap = MinHeap.build_unsorted(Leaf(sym, w) for sym, w in self.freqs.items()).heapify()

        while len(heap) > 1:  # Построение классического дерева по Хаффману
            left = heap.extract_min()
            right = heap.extract_min()

            heap.insert(Internal(left, right, left.freq + right.freq))

        return heap.peek()

    def _assign_codes(self, root: Node) -> List[CodeEntry]:
        """Назначает коды листьям обходом в глубину: влево '0', вправо '1'.

        Дерево из одного листа получает код '0' - путь нулевой длины символ не различает.
        """

        # Входной файл состоит из одного символа
        if isinstance(root, Leaf):
            return [CodeEntry(root.symbol, "0")]

        table = []

        def dfs(node, path):
            '''Обход дерева в глубину'''
            if isinstance(node, Leaf):  # если достигнут лист дерева - базовый случай
                table.append(CodeEntry(node.symbol, path))
            else:                       # рекурсивный случай
                dfs(node.left, path + "0")
                dfs(node.right, path + "1")

        dfs(root, "")

        log.debug("Assigned %d codes, longest is %d bits", len(table), max(e.length for e in table))
        return table

# -------------------------------------------------------------------------------------------------

    def _rebuild_tree(self, code_table: List[CodeEntry]) -> Internal:
        """Восстанавливает дерево как префиксное дерево по кодовой таблице.

        Args:
            code_table (List[CodeEntry]): Записи (символ, код) из заголовка.

        Returns:
            Internal: Корень дерева.

        Raises:
            CorruptCodeTable: Пустой код, код-префикс другого кода, совпадающие коды
                или неполное дерево (для таблиц из двух и более символов).
        """
        root = Internal()

        for entry in code_table:
            if not entry.code:
                raise CorruptCodeTable(f"Пустой код у символа {entry.symbol}")

            bits = code_to_bits(entry.code)
            node = root

            for bit in bits[:-1]:
                child = _child(node, bit)
                if child is None:
                    child = _attach(node, bit, Internal())
                elif isinstance(child, Leaf):
                    raise CorruptCodeTable(f"Код символа {child.symbol} является префиксом кода символа {entry.symbol}")
                node = child

            if _child(node, bits[-1]) is not None:
                raise CorruptCodeTable(f"Код {entry.code} символа {entry.symbol} неоднозначен")
            _attach(node, bits[-1], Leaf(entry.symbol))

        if len(code_table) > 1:
            _check_complete(root)

        return root

# =================================================================================================================

def _child(node: Internal, bit: int) -> Optional[Node]:
    return node.right if bit else node.left

def _attach(node: Internal, bit: int, child: Node) -> Node:
    if bit:
        node.right = child
    else:
        node.left = child
    return child

def _check_complete(root: Internal):
    stack = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            continue

        if node.left is None or node.right is None:
            raise CorruptCodeTable("Кодовая таблица неполна: у внутреннего узла нет потомка")
        stack.append(node.left)
        stack.append(node.right)

# =================================================================================================================

def compress(input_stream: BinaryIO, output_stream: BinaryIO) -> None:
    """Сжимает input_stream в output_stream. Ошибки - подклассы CodecError."""
    Huffman().compress(input_stream, output_stream)

def decompress(input_stream: BinaryIO, output_stream: BinaryIO) -> None:
    """Распаковывает input_stream в output_stream. Ошибки - подклассы CodecError."""
    Huffman().decompress(input_stream, output_stream)
