# -*- coding: utf-8 -*-
"""
Raster: The mathematics of broadcast video color signals
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: raster_primaries.py — Chromaticities of the ITU-R RGB color spaces.

Primaries are given as CIE xyY triplets.  The ``Y`` component of each
primary is its relative luminance, i.e. the contribution of that primary to
reference white.  Deriving RGB <-> XYZ matrices from these values is left
to the colorimetry code that consumes them.

Note (BT.709):
    The primaries' Y values below (0.212656, 0.715158, 0.072186) are the
    exact luminances implied by the chromaticities.  Rec. 709 item 3.2
    rounds them to (0.2126, 0.7152, 0.0722/0.07212) for the *luma* equation;
    those rounded weights live with the difference functions.  The two
    vectors are intentionally distinct.

References:
    - ITU-R BT.601-7, item 2.5.1 / Table 3
    - ITU-R BT.709-6, items 1.3 and 1.4
    - ITU-R BT.2020-2, Table 3
"""

from dataclasses import dataclass
from typing import Final, NamedTuple

import numpy as np

from raster_numeric import ArrayFloat

__all__ = [
    "Chromaticity",
    "WhitePoint",
    "Primaries",
    "RgbSpace",
    "D65",
    "BT601_525_PRIMARIES",
    "BT601_625_PRIMARIES",
    "BT709_PRIMARIES",
    "BT2020_PRIMARIES",
    "BT601_525_SPACE",
    "BT601_625_SPACE",
    "BT709_SPACE",
    "BT2020_SPACE",
]


class Chromaticity(NamedTuple):
    """A CIE xyY coordinate."""
    x: float
    y: float
    Y: float


class WhitePoint(NamedTuple):
    """Reference white as CIE 1931 xy chromaticity (Y = 1)."""
    name: str
    x: float
    y: float

    def as_xyY(self) -> Chromaticity:
        return Chromaticity(self.x, self.y, 1.0)


@dataclass(frozen=True, slots=True)
class Primaries:
    """Red, green and blue primaries of one color space."""
    name: str
    red: Chromaticity
    green: Chromaticity
    blue: Chromaticity

    def luminance(self) -> tuple[float, float, float]:
        """Y components of the red, green and blue primaries."""
        return (self.red.Y, self.green.Y, self.blue.Y)

    def as_array(self) -> ArrayFloat:
        """Primaries as a (3, 3) float64 array, one xyY row per primary."""
        return np.array([self.red, self.green, self.blue], dtype=np.float64)


@dataclass(frozen=True, slots=True)
class RgbSpace:
    """An RGB color space: a set of primaries plus a reference white."""
    name: str
    primaries: Primaries
    white_point: WhitePoint


D65: Final[WhitePoint] = WhitePoint("D65", 0.3127, 0.3290)

# BT.601 primaries carry the BT.601 luma weights as their Y.
_BT601_Y: Final[tuple[float, float, float]] = (0.2990, 0.5870, 0.1140)
# Exact luminances derived from the BT.709 chromaticities and D65.
_BT709_Y: Final[tuple[float, float, float]] = (0.212656, 0.715158, 0.072186)
# BT.2020 Table 4: derivation of luminance signal.
_BT2020_Y: Final[tuple[float, float, float]] = (0.2627, 0.6780, 0.0593)

BT601_525_PRIMARIES: Final[Primaries] = Primaries(
    "BT601_525",
    red=Chromaticity(0.6300, 0.3400, _BT601_Y[0]),
    green=Chromaticity(0.3100, 0.5950, _BT601_Y[1]),
    blue=Chromaticity(0.1550, 0.0700, _BT601_Y[2]),
)

BT601_625_PRIMARIES: Final[Primaries] = Primaries(
    "BT601_625",
    red=Chromaticity(0.6400, 0.3300, _BT601_Y[0]),
    green=Chromaticity(0.2900, 0.6000, _BT601_Y[1]),
    blue=Chromaticity(0.1500, 0.0600, _BT601_Y[2]),
)

BT709_PRIMARIES: Final[Primaries] = Primaries(
    "BT709",
    red=Chromaticity(0.6400, 0.3300, _BT709_Y[0]),
    green=Chromaticity(0.3000, 0.6000, _BT709_Y[1]),
    blue=Chromaticity(0.1500, 0.0600, _BT709_Y[2]),
)

BT2020_PRIMARIES: Final[Primaries] = Primaries(
    "BT2020",
    red=Chromaticity(0.708, 0.292, _BT2020_Y[0]),
    green=Chromaticity(0.170, 0.797, _BT2020_Y[1]),
    blue=Chromaticity(0.131, 0.046, _BT2020_Y[2]),
)

BT601_525_SPACE: Final[RgbSpace] = RgbSpace("BT601_525", BT601_525_PRIMARIES, D65)
BT601_625_SPACE: Final[RgbSpace] = RgbSpace("BT601_625", BT601_625_PRIMARIES, D65)
BT709_SPACE: Final[RgbSpace] = RgbSpace("BT709", BT709_PRIMARIES, D65)
BT2020_SPACE: Final[RgbSpace] = RgbSpace("BT2020", BT2020_PRIMARIES, D65)
