# Hfm_Format.py
"""
HFM file format module
Формат заголовка и тела сжатого файла

Структура:
Line 1       FinalBits     (ASCII int)  0 - заглушка / тело кратно 7 битам, иначе k+1 (2..7)
Line 2       SymbolCount   (ASCII int)  N различных символов, 1..128
Lines 3..N+2 CodeTable                  <байт символа><код из '0'/'1'>\\n, без разделителя
...          Body          (variable)   в каждом байте значимы младшие 7 бит, старшим битом вперёд

Примечания:
- Байты тела лежат в диапазоне 0..127: бит 7 всегда ноль.
- В последнем байте тела значимы только первые (старшие) FinalBits-1 бит из 7,
  остальное - нулевой padding. Если FinalBits == 0, последний байт заполнен полностью.
- FinalBits пишется заглушкой '0' до сжатия и перезаписывается на месте одной цифрой.
"""
# =================================================================================================================

from __future__ import annotations
import io
from dataclasses import dataclass, field
from typing import BinaryIO, List

from Hfm_Errors import *

# =================================================================================================================

# lims
ALPHABET_SIZE           = 128
MAX_CODE_LENGTH         = ALPHABET_SIZE     # глубина дерева на 128 листьях не превышает 127
MAX_FINAL_BITS          = 7
MAX_NUMBER_LINE         = 16                # байт на строку с числом, включая '\n'

# =================================================================================================

# Bit packing constants
GROUP_BITS              = 7
GROUP_MASK              = (1 << GROUP_BITS) - 1     # 0x7F
PLACEHOLDER_BITS        = 0
OFF_FINAL_BITS          = 0                         # смещение первой строки от начала заголовка

# I/O
CHUNK_SIZE              = 1 << 16
FILE_SUFFIX             = ".hfm"
LINE_END                = b"\n"

# =================================================================================================================

@dataclass
class CodeEntry:
    symbol: int
    code: str                   = ""        # строка из '0' и '1'

    @property
    def length(self) -> int:
        return len(self.code)

    @property
    def value(self) -> int:
        """Код как целое число (старший бит - первый символ строки)."""
        return int(self.code, 2)

    def to_bytes(self) -> bytes:
        """Сериализует запись в строку кодовой таблицы: символ, код, перевод строки."""
        return bytes([self.symbol]) + self.code.encode("ascii") + LINE_END

# =================================================================================================================

@dataclass
class HfmHeader:
    final_bits: int             = PLACEHOLDER_BITS
    code_table: List[CodeEntry] = field(default_factory=list)

    @property
    def symbol_count(self) -> int:
        return len(self.code_table)

    @property
    def last_byte_bits(self) -> int:
        """Сколько бит последнего байта тела являются полезной нагрузкой."""
        if self.final_bits == PLACEHOLDER_BITS:
            return GROUP_BITS
        return self.final_bits - 1

    def to_bytes(self) -> bytes:
        """Сериализует заголовок: две строки с числами и кодовую таблицу."""

        self.validate_header(ValueError)
        self.validate_code_table(ValueError)

        buf = bytearray()
        buf += b"%d\n%d\n" % (self.final_bits, self.symbol_count)
        for entry in self.code_table:
            buf += entry.to_bytes()

        return bytes(buf)

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "HfmHeader":
        """Читает заголовок из начала потока и оставляет поток на первом байте тела.

        Raises:
            MalformedHeader: нет строк заголовка, не числа или кодовая таблица обрывается.
            CorruptCodeTable: коды не из '0'/'1', пустые, слишком длинные или повторяются символы.
        """

        final_bits = _read_number(stream)
        count = _read_number(stream)

        H = cls(final_bits=final_bits)
        # количество проверяем до чтения таблицы, чтобы не читать мусор
        if not 1 <= count <= ALPHABET_SIZE:
            raise MalformedHeader(f"Недопустимое количество символов: {count}. Ожидалось 1..{ALPHABET_SIZE}")
        H.validate_header(MalformedHeader)

        for i in range(count):
            symbol_b = stream.read(1)
            if not symbol_b:
                raise MalformedHeader(f"Кодовая таблица обрывается на записи {i + 1} из {count}")

            line = stream.readline(MAX_CODE_LENGTH + 1)
            if not line.endswith(LINE_END):
                if len(line) > MAX_CODE_LENGTH:
                    raise CorruptCodeTable(f"Код символа {symbol_b[0]} длиннее {MAX_CODE_LENGTH} бит")
                raise MalformedHeader(f"Кодовая таблица обрывается на записи {i + 1} из {count}")

            # latin-1 декодирует любой байт, посторонние символы отсеет validate_code_table
            H.code_table.append(CodeEntry(symbol_b[0], line[:-1].decode("latin-1")))

        H.validate_code_table(CorruptCodeTable)

        return H

    def write_final_bits(self, stream: BinaryIO, offset: int = OFF_FINAL_BITS) -> None:
        """Перезаписывает заглушку в первой строке и возвращает поток в конец.

        Args:
            stream (BinaryIO): Поток записи с возможностью seek.
            offset (int): Позиция начала заголовка в потоке.
        """
        self.validate_header(ValueError)

        stream.seek(offset)
        stream.write(str(self.final_bits).encode("ascii"))
        stream.seek(0, io.SEEK_END)

    def validate_header(self, type):
        if not 0 <= self.final_bits <= MAX_FINAL_BITS:
            raise type(f"Недопустимое число бит последнего байта: {self.final_bits}")

        if self.symbol_count > ALPHABET_SIZE:
            raise type(f"Превышен размер алфавита. Максимум: {ALPHABET_SIZE}")

    def validate_code_table(self, type):
        seen = set()
        for entry in self.code_table:
            if not 0 <= entry.symbol <= 0xFF:
                raise type(f"Символ вне диапазона байта: {entry.symbol}")

            if entry.symbol in seen:
                raise type(f"Символ {entry.symbol} встречается в таблице дважды")
            seen.add(entry.symbol)

            if entry.length == 0:
                raise type(f"Пустой код у символа {entry.symbol}")

            if entry.length > MAX_CODE_LENGTH:
                raise type(f"Код символа {entry.symbol} длиннее {MAX_CODE_LENGTH} бит")

            if set(entry.code) - {"0", "1"}:
                raise type(f"Код символа {entry.symbol} содержит символы кроме '0' и '1': {entry.code!r}")

# =================================================================================================================

def _read_number(stream: BinaryIO) -> int:
    line = stream.readline(MAX_NUMBER_LINE)
    if not line.endswith(LINE_END):
        raise MalformedHeader("Строка заголовка отсутствует или обрезана")

    try:
        return int(line.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise MalformedHeader(f"Ожидалось число в строке заголовка, получено {line!r}") from None

# End of module
