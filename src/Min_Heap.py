from typing import List

"""Двоичная min-куча узлов дерева Хаффмана на массиве.

Упорядочивает узлы по полю freq. Равные частоты не упорядочиваются по символу:
исход сравнения определяется только позицией элемента в массиве, поэтому
форма дерева зависит от порядка вставки, но не его оптимальность.

Атрибуты:
    arr (List): Массив ссылок на узлы. Его длина может превышать size.
    size (int): Логический размер кучи.

API:
    MinHeap.build_unsorted(nodes).heapify() → куча
    extract_min() / insert(node)
"""

class MinHeap:
# -------------------------------------------------------------------------------------------------

    def __init__(self):
        self.arr: List = []
        self.size: int = 0

    @classmethod
    def build_unsorted(cls, nodes) -> "MinHeap":
        """Оборачивает массив узлов без какого-либо упорядочивания

        Args:
            nodes: Узлы с полем freq.

        Returns:
            MinHeap: Куча, в которой инвариант ещё не восстановлен.
        """
        heap = cls()
        heap.arr = list(nodes)
        heap.size = len(heap.arr)
        return heap

    def __len__(self) -> int:
        return self.size

# -------------------------------------------------------------------------------------------------

    def heapify(self) -> "MinHeap":
        """Построение кучи за O(n): просеивание вниз от последнего внутреннего узла к корню."""
        for i in range((self.size - 2) // 2, -1, -1):
            self.heapify_down(i)
        return self

    def heapify_down(self, i: int):
        """Восстанавливает инвариант кучи в поддереве с корнем i.

        Args:
            i (int): Индекс корня поддерева.
        """
        smallest = i
        left = 2 * i + 1
        right = 2 * i + 2

        if left < self.size and self.arr[left].freq < self.arr[smallest].freq:
            smallest = left

        if right < self.size and self.arr[right].freq < self.arr[smallest].freq:
            smallest = right

        if smallest != i:
            self._swap(smallest, i)
            self.heapify_down(smallest)

    def peek(self):
        if self.size == 0:
            raise IndexError("peek from empty heap")
        return self.arr[0]

    def extract_min(self):
        """Извлекает узел с минимальной частотой.

        Корень заменяется последним элементом, логический размер уменьшается на 1.

        Raises:
            IndexError: Если куча пуста.
        """
        if self.size == 0:
            raise IndexError("extract from empty heap")

        min_node = self.arr[0]
        self.size -= 1
        self.arr[0] = self.arr[self.size]

        self.heapify_down(0)
        return min_node

    def insert(self, node):
        """Добавляет узел в позицию size и просеивает его вверх."""
        if self.size < len(self.arr):
            self.arr[self.size] = node          # повторное использование освободившейся ячейки
        else:
            self.arr.append(node)
        self.size += 1

        i = self.size - 1
        while i and self.arr[i].freq < self.arr[(i - 1) // 2].freq:
            self._swap(i, (i - 1) // 2)
            i = (i - 1) // 2

# -------------------------------------------------------------------------------------------------

    def _swap(self, a: int, b: int):
        self.arr[a], self.arr[b] = self.arr[b], self.arr[a]
