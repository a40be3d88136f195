import argparse

from Hfm_Format import FILE_SUFFIX

# =================================================================================================================

PROG = "huffman"

COLORS = {
    "red":      "\033[1;31m",
    "green":    "\033[1;32m",
    "yellow":   "\033[1;33m",
}
RESET = "\033[1;0m"

# =================================================================================================================

def init() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description='Compress or decompress "FILE1" to "FILE2" with static Huffman coding.',
        epilog="if FILE2 does not exist, huffman makes it.",
    )
    sub = parser.add_subparsers(dest="cmd")

    # Общие параметры для всех режимов
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", action="store_true", help="Подробный лог (DEBUG)")
    common.add_argument("--log-file", default=None, help="Дублировать лог в файл")
    common.add_argument("--no-color", action="store_true", help="Без цветного вывода")

    # ------------------------------------------------------------
    # compress
    # ------------------------------------------------------------
    c = sub.add_parser("compress", aliases=["c", "C"], parents=[common], help="compress FILE1 to FILE2")
    c.add_argument("input", metavar="FILE1")
    c.add_argument("output", metavar="FILE2", help=f"суффикс {FILE_SUFFIX} добавляется, если его нет")
    c.add_argument("--stats", action="store_true")
    c.set_defaults(mode="compress")

    # ------------------------------------------------------------
    # decompress
    # ------------------------------------------------------------
    d = sub.add_parser("decompress", aliases=["d", "D"], parents=[common], help="decompress FILE1 to FILE2")
    d.add_argument("input", metavar="FILE1", help=f"имя должно оканчиваться на {FILE_SUFFIX}")
    d.add_argument("output", metavar="FILE2")
    d.set_defaults(mode="decompress")

    # ------------------------------------------------------------
    # info
    # ------------------------------------------------------------
    i = sub.add_parser("info", parents=[common], help="Показать заголовок и кодовую таблицу")
    i.add_argument("input", metavar="FILE1")
    i.set_defaults(mode="info")

    return parser

# =================================================================================================================

def has_suffix(path: str) -> bool:
    return path.endswith(FILE_SUFFIX)

def with_suffix(path: str) -> str:
    """Добавляет .hfm к имени сжатого файла, если суффикса нет."""
    return path if has_suffix(path) else path + FILE_SUFFIX

# =================================================================================================================

def paint(text: str, color: str, enabled: bool = True) -> str:
    if not enabled:
        return text
    return f"{COLORS[color]}{text}{RESET}"

def status(action: str, enabled: bool = True):
    """Печатает строку вида 'Compressing! Please wait...'."""
    print(paint(f"{action}!", "green", enabled), paint("Please wait...", "yellow", enabled))

def done(action: str, enabled: bool = True):
    print(paint(f"{action} completed!", "green", enabled))

def error(message: str, enabled: bool = True):
    print(f"{PROG}: {paint('Error:', 'red', enabled)} {message}")
