"""Small dense, sparse (CSR) and vector containers used by the network model."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

_PHASE_PRESENT_TOL = 1e-9
_SINGULAR_TOL = 1e-12


class Vector:
    """Fixed-size vector whose entries start at zero."""

    __slots__ = ("_data",)

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("Vector size must not be negative")
        self._data: list[Any] = [0.0] * size

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __getitem__(self, index: int) -> Any:
        return self._data[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self._data[index] = value

    def __repr__(self) -> str:
        return f"Vector({self._data!r})"

    @classmethod
    def _from_iterable(cls, values: Iterable[Any]) -> "Vector":
        items = list(values)
        result = cls(len(items))
        result._data = items
        return result

    def _check_same_size(self, other: "Vector") -> None:
        if len(self) != len(other):
            raise ValueError("Vectors must be the same size to add!")

    def __mul__(self, scalar: Any) -> "Vector":
        if isinstance(scalar, (Vector, MatrixDense, MatrixSparseCSR)):
            return NotImplemented
        return Vector._from_iterable(value * scalar for value in self._data)

    def __add__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_size(other)
        return Vector._from_iterable(a + b for a, b in zip(self._data, other._data))

    def __sub__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_size(other)
        return Vector._from_iterable(a - b for a, b in zip(self._data, other._data))


class MatrixDense:
    """Row-major dense matrix indexed as ``m[row, col]``."""

    __slots__ = ("_rows", "_cols", "_data")

    def __init__(self, rows: int = 0, cols: int = 0) -> None:
        if rows < 0 or cols < 0:
            raise ValueError("Matrix dimensions must not be negative")
        self._rows = rows
        self._cols = cols
        self._data: list[Any] = [0.0] * (rows * cols)

    def rows(self) -> int:
        return self._rows

    def cols(self) -> int:
        return self._cols

    def _offset(self, key: tuple[int, int]) -> int:
        row, col = key
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            raise IndexError("Matrix Index out of bounds")
        return row * self._cols + col

    def __getitem__(self, key: tuple[int, int]) -> Any:
        return self._data[self._offset(key)]

    def __setitem__(self, key: tuple[int, int], value: Any) -> None:
        self._data[self._offset(key)] = value

    def __repr__(self) -> str:
        return f"MatrixDense({self._rows}, {self._cols})"

    def __add__(self, other: "MatrixDense") -> "MatrixDense":
        if not isinstance(other, MatrixDense):
            return NotImplemented
        if (self._rows, self._cols) != (other._rows, other._cols):
            raise ValueError("Matrix sizes must match for addition")
        result = MatrixDense(self._rows, self._cols)
        result._data = [a + b for a, b in zip(self._data, other._data)]
        return result

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, Vector):
            return self._times_vector(other)
        if isinstance(other, MatrixDense):
            return self._times_matrix(other)
        return NotImplemented

    def _times_vector(self, vec: Vector) -> Vector:
        if self._cols != len(vec):
            raise ValueError("Vector size must match Matrix columns")
        result = Vector(self._rows)
        for i in range(self._rows):
            row = self._data[i * self._cols:(i + 1) * self._cols]
            total: Any = 0.0
            for a, b in zip(row, vec):
                total = total + a * b
            result[i] = total
        return result

    def _times_matrix(self, other: "MatrixDense") -> "MatrixDense":
        if self._cols != other._rows:
            raise ValueError("Matrix A cols must match Matrix B rows")
        result = MatrixDense(self._rows, other._cols)
        for i in range(self._rows):
            for j in range(other._cols):
                total: Any = 0.0
                for k in range(self._cols):
                    total = total + self[i, k] * other[k, j]
                result[i, j] = total
        return result

    def scaled(self, factor: Any) -> "MatrixDense":
        """Return a copy with every entry multiplied by ``factor``."""
        result = MatrixDense(self._rows, self._cols)
        result._data = [value * factor for value in self._data]
        return result

    def inverse(self) -> "MatrixDense":
        """Invert a 3x3 phase matrix, restricted to the phases that are present.

        A phase is present when its diagonal entry is non-zero; absent phases
        stay zero in the result.
        """
        if (self._rows, self._cols) != (3, 3):
            raise ValueError("Currently, inverse() is only optimized for 3x3 phase matrices!")

        result = MatrixDense(3, 3)
        present = [p for p in range(3) if abs(self[p, p]) > _PHASE_PRESENT_TOL]

        if len(present) == 3:
            a, b, c = self[0, 0], self[0, 1], self[0, 2]
            d, e, f = self[1, 0], self[1, 1], self[1, 2]
            g, h, i = self[2, 0], self[2, 1], self[2, 2]

            det = a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)
            if abs(det) < _SINGULAR_TOL:
                raise ValueError("3x3 Matrix is singular!")

            inv_det = 1.0 / det
            result[0, 0] = (e * i - f * h) * inv_det
            result[0, 1] = -(b * i - c * h) * inv_det
            result[0, 2] = (b * f - c * e) * inv_det
            result[1, 0] = -(d * i - f * g) * inv_det
            result[1, 1] = (a * i - c * g) * inv_det
            result[1, 2] = -(a * f - c * d) * inv_det
            result[2, 0] = (d * h - e * g) * inv_det
            result[2, 1] = -(a * h - b * g) * inv_det
            result[2, 2] = (a * e - b * d) * inv_det
        elif len(present) == 2:
            r1, r2 = present
            a, b = self[r1, r1], self[r1, r2]
            c, d = self[r2, r1], self[r2, r2]

            det = a * d - b * c
            if abs(det) < _SINGULAR_TOL:
                raise ValueError("2x2 Sub-Matrix is singular!")

            inv_det = 1.0 / det
            result[r1, r1] = d * inv_det
            result[r1, r2] = -b * inv_det
            result[r2, r1] = -c * inv_det
            result[r2, r2] = a * inv_det
        elif len(present) == 1:
            (p,) = present
            result[p, p] = 1.0 / self[p, p]

        return result

    def __str__(self) -> str:
        lines = []
        for i in range(self._rows):
            row = self._data[i * self._cols:(i + 1) * self._cols]
            lines.append("[ " + "".join(f"{value}  " for value in row) + "]\n")
        return "".join(lines)


class MatrixSparseCSR:
    """Sparse matrix collected as triplets and compressed to CSR form."""

    __slots__ = ("_rows", "_cols", "_triplets", "_values", "_col_indices", "_row_ptr")

    def __init__(self, rows: int, cols: int) -> None:
        if rows < 0 or cols < 0:
            raise ValueError("Matrix dimensions must not be negative")
        self._rows = rows
        self._cols = cols
        self._triplets: list[tuple[int, int, Any]] = []
        self._values: list[Any] = []
        self._col_indices: list[int] = []
        self._row_ptr: list[int] = [0] * (rows + 1)

    def add_value(self, row: int, col: int, value: Any) -> None:
        """Queue an entry; it becomes visible after :meth:`build_csr`."""
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            raise IndexError("Matrix Index out of bounds")
        self._triplets.append((row, col, value))

    def build_csr(self) -> None:
        """Sort the queued entries by row then column and compress them."""
        if not self._triplets:
            return

        existing = [
            (row, col, value)
            for row in range(self._rows)
            for col, value in self.row_entries(row)
        ]
        entries = sorted(existing + self._triplets, key=lambda t: (t[0], t[1]))

        counts = [0] * (self._rows + 1)
        for row, _, _ in entries:
            counts[row + 1] += 1
        for i in range(self._rows):
            counts[i + 1] += counts[i]

        self._values = [value for _, _, value in entries]
        self._col_indices = [col for _, col, _ in entries]
        self._row_ptr = counts
        self._triplets = []

    def __mul__(self, x: Vector) -> Vector:
        if not isinstance(x, Vector):
            return NotImplemented
        if len(x) != self._cols:
            raise ValueError("Vector size must match Matrix columns!")
        result = Vector(self._rows)
        for i in range(self._rows):
            total: Any = 0.0
            for col, value in self.row_entries(i):
                total = total + value * x[col]
            result[i] = total
        return result

    def values(self) -> tuple[Any, ...]:
        return tuple(self._values)

    def col_indices(self) -> tuple[int, ...]:
        return tuple(self._col_indices)

    def row_ptr(self) -> tuple[int, ...]:
        return tuple(self._row_ptr)

    def row_entries(self, row: int) -> Iterator[tuple[int, Any]]:
        """Yield ``(column, value)`` for the compressed entries of ``row``."""
        if not 0 <= row < self._rows:
            raise IndexError("Matrix Index out of bounds")
        start, end = self._row_ptr[row], self._row_ptr[row + 1]
        return zip(self._col_indices[start:end], self._values[start:end])