"""Module matrix encoding: wraps the qrcode library as the symbol encoder."""

from dataclasses import dataclass
from enum import Enum

import numpy as np
import qrcode
import qrcode.constants
from qrcode.exceptions import DataOverflowError

from qrbrand.errors import ContentTooLarge
from qrbrand.logging import audit, get_logger, trace

log = get_logger("matrix")


class ECCLevel(Enum):
    L = qrcode.constants.ERROR_CORRECT_L  # 7%
    M = qrcode.constants.ERROR_CORRECT_M  # 15%
    Q = qrcode.constants.ERROR_CORRECT_Q  # 25%
    H = qrcode.constants.ERROR_CORRECT_H  # 30%


ECC_NAMES = {level.name: level for level in ECCLevel}


@dataclass(frozen=True)
class ModuleMatrix:
    """Square grid of modules, True = dark. Never mutated after encoding."""

    modules: tuple[tuple[bool, ...], ...]
    version: int | None = None

    def __post_init__(self):
        n = len(self.modules)
        if n == 0 or any(len(row) != n for row in self.modules):
            raise ValueError(f"module matrix must be square, got {n} rows")

    @classmethod
    def from_rows(cls, rows, version: int | None = None) -> "ModuleMatrix":
        return cls(tuple(tuple(bool(m) for m in row) for row in rows), version)

    @property
    def size(self) -> int:
        """Side length in modules."""
        return len(self.modules)

    def to_array(self) -> np.ndarray:
        """Fresh bool array of shape (size, size)."""
        return np.array(self.modules, dtype=bool)

    def __repr__(self):
        return f"ModuleMatrix(version={self.version}, size={self.size})"


@trace
def encode_matrix(content: str, ecc: str = "H") -> ModuleMatrix:
    """Encode *content* into a module matrix at the smallest fitting version.

    Raises:
        ContentTooLarge: no QR version can hold the content at this level.
    """
    ecc_level = ECC_NAMES[ecc.upper()]
    qr = qrcode.QRCode(
        version=None,
        error_correction=ecc_level.value,
        box_size=1,
        border=0,
    )
    qr.add_data(content)
    try:
        qr.make(fit=True)
    except DataOverflowError as exc:
        audit("qr.capacity_exceeded", logger=log, length=len(content), ecc=ecc_level.name)
        raise ContentTooLarge(len(content), ecc_level.name) from exc

    matrix = ModuleMatrix.from_rows(qr.modules, version=qr.version)
    log.debug("encoded version=%d size=%d", qr.version, matrix.size)
    return matrix
