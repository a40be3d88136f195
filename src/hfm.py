"""
CLI huffman:
Usage example:
  py src/hfm.py compress notes.txt notes.hfm --stats --verbose
  py src/hfm.py decompress notes.hfm notes.txt
  py src/hfm.py info notes.hfm
  huffman c notes.txt notes          (после pip install: будет создан notes.hfm)

Коды возврата: 0 - успех, 1 - ошибка CLI/файловой системы, 2..6 - CodecError.exit_code
"""

# =================================================================================================================

import logging
import os
import sys
import tempfile
from logging.handlers import RotatingFileHandler

import hfm_cli

from Huffman import *

log = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s][%(levelname)s] %(message)s"

# =================================================================================================================

def compress_file(args) -> int:
    """Сжимает args.input в args.output (с суффиксом .hfm)."""
    output = hfm_cli.with_suffix(args.output)
    hfm_cli.status("Compressing", args.color)
    log.debug("[compress] %s -> %s", args.input, output)

    with open(args.input, "rb") as src:
        header = _write_atomic(output, lambda dst: Huffman().compress(src, dst))

    hfm_cli.done("Compressing", args.color)

    if args.stats:
        size = os.path.getsize(args.input)
        packed = os.path.getsize(output)
        print("\n=== Statistics ===")
        print(f"• {os.path.basename(args.input)}: {size} bytes → {packed} bytes ({packed / size:.1%})")
        print(f"• Distinct symbols: {header.symbol_count}")
        print("Compressed file saved to:", output)

    return 0

def decompress_file(args) -> int:
    """Распаковывает args.input (.hfm) в args.output."""
    if not hfm_cli.has_suffix(args.input):
        hfm_cli.error(f"The file name is incorrect: File name must be <file_name>{FILE_SUFFIX}", args.color)
        return 1

    hfm_cli.status("Decompressing", args.color)
    log.debug("[decompress] %s -> %s", args.input, args.output)

    with open(args.input, "rb") as src:
        _write_atomic(args.output, lambda dst: Huffman().decompress(src, dst))

    hfm_cli.done("Decompressing", args.color)
    return 0

def info_mode(args) -> int:
    """Печатает заголовок и кодовую таблицу сжатого файла."""
    print("[info] Analyzing:", args.input)

    with open(args.input, "rb") as f:
        header = HfmHeader.from_stream(f)

    print(f"Final bits:   {header.final_bits} ({header.last_byte_bits} payload bits in last byte)")
    print(f"Symbols:      {header.symbol_count}")
    print(f"Mean length:  {sum(e.length for e in header.code_table) / header.symbol_count:.2f} bits")

    print("\nCode table:")
    for entry in header.code_table:
        print(f" • {entry.symbol:>3} {chr(entry.symbol)!r:>8}  {entry.code}")

    return 0

MODES = {
    "compress": compress_file,
    "decompress": decompress_file,
    "info": info_mode,
}

# =================================================================================================================

def _write_atomic(path: str, write):
    """Пишет во временный файл рядом с path и атомарно заменяет path.

    При ошибке временный файл удаляется, path не создаётся и не портится.
    """
    dir_path = os.path.dirname(os.path.abspath(path))     # Обрезка названия файла
    name = os.path.basename(path)                         # Выделение названия файла
    os.makedirs(dir_path, exist_ok=True)                  # Создать директорию, если нет.

    fd, tmp = tempfile.mkstemp(dir=dir_path, prefix=name + ".tmp_")
    os.close(fd)
    try:
        with open(tmp, "wb") as f:
            result = write(f)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)

    return result

def init_logging(verbose: bool, log_file: str = None):
    """Настраивает корневой логгер: stdout и, опционально, файл с ротацией."""
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handlers = [ch]

    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=1 << 20, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        handlers.append(fh)

    logging.basicConfig(
        level=logging.DEBUG if verbose or log_file else logging.WARNING,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

# =================================================================================================================

def main(argv=None) -> int:

    parser = hfm_cli.init()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return 1

    init_logging(args.verbose, args.log_file)
    args.color = not args.no_color and sys.stdout.isatty()

    try:
        return MODES[args.mode](args)
    except CodecError as e:
        log.debug("%s failed", args.mode, exc_info=True)
        hfm_cli.error(str(e), args.color)
        return e.exit_code
    except OSError as e:
        hfm_cli.error(f"{e.strerror or e}: {e.filename or args.input}", args.color)
        return 1

# =================================================================================================================

if __name__ == "__main__":
    sys.exit(main())
