"""Unit quaternions describing 3D rotations."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

# Tolerance on |q|^2 - 1 before a quaternion is rejected or renormalised.
NORMALIZATION_EPS = 1.0e-4
# Tolerance used when checking that a matrix is a proper rotation.
ROTATION_MATRIX_EPS = 1.0e-8

_EPSILON_4TH_ROOT = np.finfo(float).eps ** 0.25


def _arcsin_x_over_x(x: float) -> float:
    if abs(x) < _EPSILON_4TH_ROOT:
        return 1.0 + x * x / 6.0
    return math.asin(x) / x


def is_valid_rotation_matrix(matrix, threshold=ROTATION_MATRIX_EPS) -> bool:
    """Return True if ``matrix`` is orthonormal with determinant one."""
    m = np.asarray(matrix, dtype=float)
    if m.shape != (3, 3):
        return False
    if abs(np.linalg.det(m) - 1.0) > threshold:
        return False
    return float(np.max(np.abs(m @ m.T - np.eye(3)))) <= threshold


@dataclass(frozen=True)
class RotationQuaternion:
    """A rotation stored as a unit quaternion (real part ``w`` first)."""

    w: float
    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        for name in ("w", "x", "y", "z"):
            object.__setattr__(self, name, float(getattr(self, name)))
        if abs(self.squared_norm() - 1.0) > NORMALIZATION_EPS:
            raise ValueError(
                f"quaternion is not normalised (squared norm {self.squared_norm()})"
            )

    @classmethod
    def identity(cls) -> RotationQuaternion:
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_rotation_matrix(cls, matrix) -> RotationQuaternion:
        """Build the quaternion of a proper rotation matrix."""
        m = np.asarray(matrix, dtype=float)
        if not is_valid_rotation_matrix(m):
            raise ValueError(f"not a valid rotation matrix:\n{m}")
        return cls._from_matrix_unchecked(m)

    @classmethod
    def _from_matrix_unchecked(cls, m: np.ndarray) -> RotationQuaternion:
        trace = m[0, 0] + m[1, 1] + m[2, 2]
        if trace > 0.0:
            t = math.sqrt(trace + 1.0)
            w = 0.5 * t
            t = 0.5 / t
            return cls(
                w,
                (m[2, 1] - m[1, 2]) * t,
                (m[0, 2] - m[2, 0]) * t,
                (m[1, 0] - m[0, 1]) * t,
            )
        i = 0
        if m[1, 1] > m[0, 0]:
            i = 1
        if m[2, 2] > m[i, i]:
            i = 2
        j = (i + 1) % 3
        k = (j + 1) % 3
        t = math.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
        imag = [0.0, 0.0, 0.0]
        imag[i] = 0.5 * t
        t = 0.5 / t
        w = (m[k, j] - m[j, k]) * t
        imag[j] = (m[j, i] + m[i, j]) * t
        imag[k] = (m[k, i] + m[i, k]) * t
        return cls(w, *imag)

    @classmethod
    def from_approximate_rotation_matrix(cls, matrix) -> RotationQuaternion:
        """Project a nearly orthonormal matrix onto the nearest rotation."""
        m = np.asarray(matrix, dtype=float)
        if not is_valid_rotation_matrix(m, NORMALIZATION_EPS):
            raise ValueError(f"matrix is too far from a rotation:\n{m}")
        _, singular_values, vh = np.linalg.svd(m)
        v = vh.T
        correction = sum(
            np.outer(v[:, col], v[:, col]) / singular_values[col] for col in range(3)
        )
        return cls.from_rotation_matrix(m @ correction)

    @classmethod
    def exp(cls, vector) -> RotationQuaternion:
        """Quaternion of the axis-scaled angle ``vector``."""
        dx = np.asarray(vector, dtype=float).reshape(3)
        theta = float(np.linalg.norm(dx))
        if theta < _EPSILON_4TH_ROOT:
            na = 0.5 + theta * theta / 48.0
        else:
            na = math.sin(theta * 0.5) / theta
        ct = math.cos(theta * 0.5)
        return cls(ct, dx[0] * na, dx[1] * na, dx[2] * na)

    @classmethod
    def random(cls, angle=None, rng=None) -> RotationQuaternion:
        """A random rotation; with ``angle`` given, about a random axis by that angle."""
        rng = np.random.default_rng() if rng is None else rng
        if angle is None:
            coeffs = rng.uniform(-1.0, 1.0, 4)
            coeffs /= np.linalg.norm(coeffs)
            return cls(*coeffs).unique()
        axis = rng.uniform(-1.0, 1.0, 3)
        axis /= np.linalg.norm(axis)
        half = 0.5 * float(angle)
        s = math.sin(half)
        return cls(math.cos(half), *(axis * s))

    def log(self) -> np.ndarray:
        """Axis-scaled angle vector of this rotation."""
        a = self.imaginary()
        na = float(np.linalg.norm(a))
        eta = self.w
        if abs(eta) < na:
            if eta >= 0:
                scale = math.acos(eta) / na
            else:
                scale = -math.acos(-eta) / na
        elif eta > 0:
            scale = _arcsin_x_over_x(na)
        else:
            scale = -_arcsin_x_over_x(na)
        return a * (2.0 * scale)

    def imaginary(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    def vector(self) -> np.ndarray:
        """Components as ``[w, x, y, z]``."""
        return np.array([self.w, self.x, self.y, self.z])

    def _negated(self) -> RotationQuaternion:
        return RotationQuaternion(-self.w, -self.x, -self.y, -self.z)

    def unique(self) -> RotationQuaternion:
        """The representation whose first non-zero component is positive."""
        for component in (self.w, self.x, self.y):
            if component > 0:
                return self
            if component < 0:
                return self._negated()
        return self if self.z > 0 else self._negated()

    def inverse(self) -> RotationQuaternion:
        return RotationQuaternion(self.w, -self.x, -self.y, -self.z)

    def rotate(self, v) -> np.ndarray:
        """Rotate a 3-vector, or each column of a 3xN array."""
        arr = np.asarray(v, dtype=float)
        if arr.ndim == 2:
            if arr.shape[0] != 3 or arr.shape[1] == 0:
                raise ValueError("expected a non-empty 3xN array")
            return self.rotation_matrix() @ arr
        vec = arr.reshape(3)
        q = self.imaginary()
        uv = 2.0 * np.cross(q, vec)
        return vec + self.w * uv + np.cross(q, uv)

    def inverse_rotate(self, v) -> np.ndarray:
        return self.inverse().rotate(v)

    def rotation_matrix(self) -> np.ndarray:
        w, x, y, z = self.w, self.x, self.y, self.z
        return np.array(
            [
                [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
                [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
                [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
            ]
        )

    def norm(self) -> float:
        return math.sqrt(self.squared_norm())

    def squared_norm(self) -> float:
        return self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z

    def normalized(self) -> RotationQuaternion:
        n = self.norm()
        return RotationQuaternion(self.w / n, self.x / n, self.y / n, self.z / n)

    def __mul__(self, other):
        if isinstance(other, RotationQuaternion):
            a, b = self, other
            w = a.w * b.w - a.x * b.x - a.y * b.y - a.z * b.z
            x = a.w * b.x + a.x * b.w + a.y * b.z - a.z * b.y
            y = a.w * b.y - a.x * b.z + a.y * b.w + a.z * b.x
            z = a.w * b.z + a.x * b.y - a.y * b.x + a.z * b.w
            sq = w * w + x * x + y * y + z * z
            if abs(sq - 1.0) > NORMALIZATION_EPS:
                n = math.sqrt(sq)
                w, x, y, z = w / n, x / n, y / n, z / n
            return RotationQuaternion(w, x, y, z)
        if isinstance(other, (np.ndarray, list, tuple)):
            return self.rotate(other)
        return NotImplemented