# tests/test_unit_huffman.py

import sys, os
# Добавляем src/ в путь
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import io
import unittest
from itertools import combinations

from Huffman import *
from Min_Heap import MinHeap
from Bit_Packing import *

# ======================================================================
#                        HELPERS
# ======================================================================

def fibonacci_freqs(n):
    """Частоты Фибоначчи дают максимально вырожденное дерево глубины n-1."""
    a, b = 1, 1
    freqs = {}
    for sym in range(n):
        freqs[sym] = a
        a, b = b, a + b
    return freqs

def assert_heap_invariant(test, heap):
    for i in range(heap.size):
        for child in (2 * i + 1, 2 * i + 2):
            if child < heap.size:
                test.assertLessEqual(heap.arr[i].freq, heap.arr[child].freq)

# ======================================================================
#                        UNIT TESTS FOR MIN HEAP
# ======================================================================

class TestMinHeap(unittest.TestCase):

    def test_build_unsorted_keeps_order(self):
        nodes = [Leaf(s, f) for s, f in enumerate([5, 3, 8, 1, 4])]
        heap = MinHeap.build_unsorted(nodes)

        self.assertEqual(heap.size, 5)
        self.assertEqual([n.freq for n in heap.arr], [5, 3, 8, 1, 4])

    def test_heapify_and_extract_order(self):
        heap = MinHeap.build_unsorted(Leaf(s, f) for s, f in enumerate([5, 3, 8, 1, 4, 9, 2])).heapify()
        assert_heap_invariant(self, heap)

        freqs = [heap.extract_min().freq for _ in range(7)]
        self.assertEqual(freqs, [1, 2, 3, 4, 5, 8, 9])
        self.assertEqual(len(heap), 0)

    def test_insert_sifts_up(self):
        heap = MinHeap.build_unsorted([Leaf(0, 2), Leaf(1, 4), Leaf(2, 6)]).heapify()
        heap.insert(Leaf(3, 1))

        self.assertEqual(heap.peek().symbol, 3)
        assert_heap_invariant(self, heap)

    def test_insert_reuses_capacity(self):
        heap = MinHeap.build_unsorted([Leaf(0, 1), Leaf(1, 2), Leaf(2, 3)]).heapify()
        heap.extract_min()
        heap.extract_min()
        heap.insert(Leaf(3, 3))

        self.assertEqual(len(heap.arr), 3)
        self.assertEqual(heap.size, 2)
        assert_heap_invariant(self, heap)

    def test_ties_are_positional(self):
        """Равные частоты извлекаются по позиции в массиве, а не по значению символа."""
        heap = MinHeap.build_unsorted([Leaf(10, 1), Leaf(20, 1), Leaf(30, 1)]).heapify()

        order = [heap.extract_min().symbol for _ in range(3)]
        self.assertEqual(order, [10, 30, 20])

    def test_extract_from_empty(self):
        heap = MinHeap.build_unsorted([])
        with self.assertRaises(IndexError):
            heap.extract_min()
        with self.assertRaises(IndexError):
            heap.peek()

# ======================================================================
#                        UNIT TESTS FOR HUFFMAN
# ======================================================================

class TestHuffmanInternals(unittest.TestCase):

    def test_frequency_counting(self):
        h = Huffman()
        stream = io.BytesIO(b"aaabbc")

        freqs = h._count_symbols(stream)
        self.assertEqual(freqs, {97: 3, 98: 2, 99: 1})
        self.assertEqual(stream.read(), b"")        # поток дочитан до конца

    def test_frequency_first_appearance_order(self):
        h = Huffman()
        freqs = h._count_symbols(io.BytesIO(b"cabbac"))
        self.assertEqual(list(freqs), [99, 97, 98])

    def test_full_alphabet_accepted(self):
        h = Huffman()
        freqs = h._count_symbols(io.BytesIO(bytes(range(ALPHABET_SIZE)) * 2))
        self.assertEqual(len(freqs), ALPHABET_SIZE)

    def test_alphabet_overflow(self):
        h = Huffman()
        with self.assertRaises(AlphabetOverflow):
            h._count_symbols(io.BytesIO(bytes(range(ALPHABET_SIZE + 1))))

    def test_build_tree_empty(self):
        h = Huffman()
        with self.assertRaises(EmptyInput):
            h._build_tree()

    def test_tree_frequencies(self):
        h = Huffman()
        h.freqs = {0: 5, 1: 7, 2: 10, 3: 1, 4: 1}
        root = h._build_tree()

        self.assertEqual(root.freq, 24)

        stack = [root]
        while stack:
            node = stack.pop()
            if isinstance(node, Internal):
                self.assertIsNotNone(node.left)
                self.assertIsNotNone(node.right)
                self.assertEqual(node.freq, node.left.freq + node.right.freq)
                stack += [node.left, node.right]

    def test_aaabbc_codes(self):
        h = Huffman()
        h.freqs = h._count_symbols(io.BytesIO(b"aaabbc"))
        table = h._assign_codes(h._build_tree())

        self.assertEqual(table, [CodeEntry(97, "0"), CodeEntry(99, "10"), CodeEntry(98, "11")])
        lengths = {e.symbol: e.length for e in table}
        self.assertLessEqual(lengths[97], lengths[98])
        self.assertLessEqual(lengths[98], lengths[99])

    def test_single_symbol_code(self):
        h = Huffman()
        h.freqs = {65: 42}
        root = h._build_tree()

        self.assertIsInstance(root, Leaf)
        self.assertEqual(h._assign_codes(root), [CodeEntry(65, "0")])

    def test_low_byte_symbols_are_leaves(self):
        """Символы 0..9 - обычные листья, а не внутренние узлы."""
        h = Huffman()
        h.freqs = {0: 4, 1: 3, 9: 2, 10: 1}
        table = h._assign_codes(h._build_tree())

        self.assertEqual(sorted(e.symbol for e in table), [0, 1, 9, 10])

    def test_prefix_free(self):
        h = Huffman()
        h.freqs = {sym: (sym * 7919) % 113 + 1 for sym in range(100)}
        table = h._assign_codes(h._build_tree())

        self.assertEqual(len(table), 100)
        for a, b in combinations(table, 2):
            self.assertFalse(a.code.startswith(b.code))
            self.assertFalse(b.code.startswith(a.code))

    def test_deep_tree_codes(self):
        """Вырожденное дерево на полном алфавите: код длиной 127 бит."""
        h = Huffman()
        h.freqs = fibonacci_freqs(ALPHABET_SIZE)
        table = h._assign_codes(h._build_tree())

        self.assertEqual(max(e.length for e in table), ALPHABET_SIZE - 1)

        root = h._rebuild_tree(table)
        self.assertIsInstance(root, Internal)

# ======================================================================
#                        UNIT TESTS FOR TREE REBUILD
# ======================================================================

class TestRebuildTree(unittest.TestCase):

    def walk(self, root, code):
        node = root
        for c in code:
            node = node.right if c == "1" else node.left
        return node

    def test_rebuild_matches_codes(self):
        h = Huffman()
        table = [CodeEntry(97, "0"), CodeEntry(99, "10"), CodeEntry(98, "11")]
        root = h._rebuild_tree(table)

        for entry in table:
            leaf = self.walk(root, entry.code)
            self.assertIsInstance(leaf, Leaf)
            self.assertEqual(leaf.symbol, entry.symbol)

    def test_rebuild_single_entry(self):
        root = Huffman()._rebuild_tree([CodeEntry(0, "0")])
        self.assertEqual(root.left, Leaf(0))
        self.assertIsNone(root.right)

    def test_prefix_conflict(self):
        h = Huffman()
        with self.assertRaises(CorruptCodeTable):
            h._rebuild_tree([CodeEntry(1, "0"), CodeEntry(2, "01"), CodeEntry(3, "1")])
        with self.assertRaises(CorruptCodeTable):
            h._rebuild_tree([CodeEntry(2, "01"), CodeEntry(1, "0"), CodeEntry(3, "1")])

    def test_duplicate_code(self):
        with self.assertRaises(CorruptCodeTable):
            Huffman()._rebuild_tree([CodeEntry(1, "0"), CodeEntry(2, "0")])

    def test_incomplete_table(self):
        with self.assertRaises(CorruptCodeTable):
            Huffman()._rebuild_tree([CodeEntry(1, "0"), CodeEntry(2, "10")])

    def test_empty_code(self):
        with self.assertRaises(CorruptCodeTable):
            Huffman()._rebuild_tree([CodeEntry(1, "")])

# ======================================================================
#                        UNIT TESTS FOR BIT PACKING
# ======================================================================

class TestBitPacking(unittest.TestCase):

    def test_byte_to_bits(self):
        bits = []
        byte_to_bits(bits, 0b1010110, 7)
        self.assertEqual(bits, [1, 0, 1, 0, 1, 1, 0])

        self.assertEqual(code_to_bits("0110"), [0, 1, 1, 0])

    def test_writer_groups_of_seven(self):
        out = io.BytesIO()
        writer = BitWriter(out)
        for value, length in [(0, 1), (0, 1), (0, 1), (3, 2), (3, 2), (2, 2)]:
            writer.write(value, length)

        self.assertEqual(writer.flush(), 2)
        self.assertEqual(out.getvalue(), b"\x0f\x40")
        self.assertEqual(writer.total_bits, 9)

    def test_writer_exact_group(self):
        out = io.BytesIO()
        writer = BitWriter(out)
        writer.write(0b1111111, 7)

        self.assertEqual(writer.flush(), 0)
        self.assertEqual(out.getvalue(), b"\x7f")

    def test_writer_long_code(self):
        out = io.BytesIO()
        writer = BitWriter(out)
        writer.write((1 << 20) - 1, 20)

        self.assertEqual(writer.flush(), 6)
        self.assertEqual(out.getvalue(), b"\x7f\x7f\x7e")

    def test_reader_trims_last_byte(self):
        bits = list(BitReader(io.BytesIO(b"\x0f\x40"), last_byte_bits=2))
        self.assertEqual(bits, [0, 0, 0, 1, 1, 1, 1, 1, 0])

    def test_reader_full_last_byte(self):
        bits = list(BitReader(io.BytesIO(b"\x01\x7f")))
        self.assertEqual(bits, [0, 0, 0, 0, 0, 0, 1] + [1] * 7)

    def test_reader_masks_high_bit(self):
        self.assertEqual(list(BitReader(io.BytesIO(b"\xff"))), [1] * 7)

    def test_reader_empty(self):
        self.assertEqual(list(BitReader(io.BytesIO(b""))), [])


if __name__ == "__main__":
    unittest.main()
