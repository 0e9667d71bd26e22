"""Writes vertices, optionally coloured, to ASCII PLY files."""

from __future__ import annotations


class PlyWriter:
    """Incremental writer for an ASCII PLY vertex list."""

    def __init__(self, filename) -> None:
        self._file = open(filename, "w", encoding="ascii")
        self._header_written = False
        self._parameters_set = False
        self._vertices_total = 0
        self._vertices_written = 0
        self._has_color = False

    def add_vertices_with_properties(self, num_vertices, has_color) -> None:
        """Declare how many vertices follow and whether they carry colour."""
        self._vertices_total = int(num_vertices)
        self._has_color = bool(has_color)
        self._parameters_set = True

    def write_header(self) -> None:
        if self._file.closed:
            raise RuntimeError("PLY file is closed")
        if not self._parameters_set:
            raise RuntimeError("cannot write PLY header: parameters not set")
        if self._header_written:
            raise RuntimeError("PLY header already written")

        lines = [
            "ply",
            "format ascii 1.0",
            f"element vertex {self._vertices_total}",
            "property float x",
            "property float y",
            "property float z",
        ]
        if self._has_color:
            lines += [
                "property uchar red",
                "property uchar green",
                "property uchar blue",
            ]
        lines.append("end_header")
        self._file.write("".join(line + "\n" for line in lines))
        self._header_written = True

    def write_vertex(self, coord, color=None) -> None:
        """Write one vertex, writing the header first if needed."""
        if not self._header_written:
            self.write_header()
        if self._vertices_written >= self._vertices_total:
            raise RuntimeError("all declared vertices have already been written")
        if (color is not None) != self._has_color:
            raise ValueError(
                "vertex colour does not match the declared vertex properties"
            )
        x, y, z = (float(c) for c in coord)
        line = f"{x:g} {y:g} {z:g}"
        if color is not None:
            line += f" {int(color.r)} {int(color.g)} {int(color.b)}"
        self._file.write(line + "\n")
        self._vertices_written += 1

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> PlyWriter:
        return self

    def __exit__(self, *args) -> None:
        self.close()