# Hfm_Errors.py
"""
Ошибки кодека .hfm

Все ошибки ядра наследуются от CodecError и являются фатальными для текущего
вызова compress/decompress. CLI выводит сообщение и завершает процесс с кодом exit_code.
"""
# =================================================================================================================

class CodecError(Exception):
    exit_code = 1

class AlphabetOverflow(CodecError):
    """Во входных данных больше ALPHABET_SIZE различных байтов."""
    exit_code = 2

class EmptyInput(CodecError):
    """Нечего сжимать: входной поток пуст."""
    exit_code = 3

class MalformedHeader(CodecError):
    """Строки заголовка отсутствуют, обрезаны или не являются числами."""
    exit_code = 4

class CorruptCodeTable(CodecError):
    """Кодовая таблица неоднозначна, неполна или содержит слишком длинный код."""
    exit_code = 5

class IoFailure(CodecError):
    """Ошибка чтения/записи нижележащего потока."""
    exit_code = 6

# End of module
