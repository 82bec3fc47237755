"""
Reference table of the 146 t_tide tidal constituents.

Frequencies (cycles/hour), Rayleigh comparison constituents, Doodson
numbers and semidiurnal phase offsets follow ``tide3.dat`` distributed with
T_TIDE.  Entries without Doodson numbers are shallow-water or compound
constituents whose equilibrium argument is not modelled here.

References
----------
- Pawlowicz, R., Beardsley, B. and Lentz, S. (2002). Classical tidal
  harmonic analysis including error estimates in MATLAB using T_TIDE.
  Computers & Geosciences 28, 929-937.
- Foreman, M.G.G. (1977). Manual for tidal heights analysis and
  prediction. Pacific Marine Science Report 77-10.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class TidalConstituent:
    """One row of the constituent table."""

    name: str
    frequency: float
    comparison: str | None
    doodson: tuple[int, int, int, int, int, int] | None
    semi: float | None

    @property
    def speed(self) -> float:
        """Angular speed in degrees per hour."""
        return self.frequency * 360.0


MEAN_LEVEL = 'Z0'
"""Name of the mean-level pseudo constituent, never fitted harmonically."""

# ---------------------------------------------------------------------------
# (name, frequency [cph], comparison, doodson, semi)
# ---------------------------------------------------------------------------
_ROWS = (
    ('Z0',    0.0,          'M2',    None,                  None),
    ('SA',    0.0001140741, 'SSA',   (0, 0, 1, 0, 0, -1),   0.0),
    ('SSA',   0.0002281591, 'Z0',    (0, 0, 2, 0, 0, 0),    0.0),
    ('MSM',   0.0013097808, 'MM',    (0, 1, -2, 1, 0, 0),   0.0),
    ('MM',    0.0015121518, 'MSF',   (0, 1, 0, -1, 0, 0),   0.0),
    ('MSF',   0.0028219327, 'Z0',    (0, 2, -2, 0, 0, 0),   0.0),
    ('MF',    0.0030500918, 'MSF',   (0, 2, 0, 0, 0, 0),    0.0),
    ('ALP1',  0.0343965699, '2Q1',   (1, -4, 2, 1, 0, 0),   -0.25),
    ('2Q1',   0.0357063507, 'Q1',    (1, -3, 0, 2, 0, 0),   -0.25),
    ('SIG1',  0.0359087218, '2Q1',   (1, -3, 2, 0, 0, 0),   -0.25),
    ('Q1',    0.0372185026, 'O1',    (1, -2, 0, 1, 0, 0),   -0.25),
    ('RHO1',  0.0374208736, 'Q1',    (1, -2, 2, -1, 0, 0),  -0.25),
    ('O1',    0.0387306544, 'K1',    (1, -1, 0, 0, 0, 0),   -0.25),
    ('TAU1',  0.0389588136, 'O1',    (1, -1, 2, 0, 0, 0),   -0.75),
    ('BET1',  0.0400404353, 'NO1',   (1, 0, -2, 1, 0, 0),   -0.75),
    ('NO1',   0.0402685944, 'K1',    (1, 0, 0, 1, 0, 0),    -0.75),
    ('CHI1',  0.0404709654, 'NO1',   (1, 0, 2, -1, 0, 0),   -0.75),
    ('PI1',   0.0414385130, 'P1',    (1, 1, -3, 0, 0, 1),   -0.25),
    ('P1',    0.0415525871, 'K1',    (1, 1, -2, 0, 0, 0),   -0.25),
    ('S1',    0.0416666721, 'K1',    (1, 1, -1, 0, 0, 1),   -0.75),
    ('K1',    0.0417807462, 'Z0',    (1, 1, 0, 0, 0, 0),    -0.75),
    ('PSI1',  0.0418948203, 'K1',    (1, 1, 1, 0, 0, -1),   -0.75),
    ('PHI1',  0.0420089053, 'K1',    (1, 1, 2, 0, 0, 0),    -0.75),
    ('THE1',  0.0430905270, 'J1',    (1, 2, -2, 1, 0, 0),   -0.75),
    ('J1',    0.0432928981, 'K1',    (1, 2, 0, -1, 0, 0),   -0.75),
    ('2PO1',  0.0443745198, None,    None,                  None),
    ('SO1',   0.0446026789, 'OO1',   None,                  None),
    ('OO1',   0.0448308380, 'J1',    (1, 3, 0, 0, 0, 0),    -0.75),
    ('UPS1',  0.0463429898, 'OO1',   (1, 4, 0, -1, 0, 0),   -0.75),
    ('ST36',  0.0733553835, None,    None,                  None),
    ('2NS2',  0.0746651643, None,    None,                  None),
    ('ST37',  0.0748675353, None,    None,                  None),
    ('ST1',   0.0748933234, None,    None,                  None),
    ('OQ2',   0.0759749451, 'EPS2',  (2, -3, 0, 3, 0, 0),   0.0),
    ('EPS2',  0.0761773161, '2N2',   (2, -3, 2, 1, 0, 0),   0.0),
    ('ST2',   0.0764054753, None,    None,                  None),
    ('ST3',   0.0772331498, None,    None,                  None),
    ('O2',    0.0774613089, None,    None,                  None),
    ('2N2',   0.0774870970, 'MU2',   (2, -2, 0, 2, 0, 0),   0.0),
    ('MU2',   0.0776894680, 'N2',    (2, -2, 2, 0, 0, 0),   0.0),
    ('SNK2',  0.0787710897, None,    None,                  None),
    ('N2',    0.0789992488, 'M2',    (2, -1, 0, 1, 0, 0),   0.0),
    ('NU2',   0.0792016198, 'N2',    (2, -1, 2, -1, 0, 0),  0.0),
    ('ST4',   0.0794555670, None,    None,                  None),
    ('OP2',   0.0802832416, None,    None,                  None),
    ('GAM2',  0.0803090296, 'ALP2',  (2, 0, -2, 2, 0, 0),   -0.5),
    ('ALP2',  0.0803973266, 'M2',    (2, 0, -1, 0, 0, 1),   -0.5),
    ('M2',    0.0805114007, 'Z0',    (2, 0, 0, 0, 0, 0),    0.0),
    ('BET2',  0.0806254748, 'M2',    (2, 0, 1, 0, 0, -1),   0.0),
    ('MKS2',  0.0807395598, 'M2',    None,                  None),
    ('ST5',   0.0809677189, None,    None,                  None),
    ('ST6',   0.0815930224, None,    None,                  None),
    ('LDA2',  0.0818211815, 'L2',    (2, 1, -2, 1, 0, 0),   -0.5),
    ('L2',    0.0820235525, 'S2',    (2, 1, 0, -1, 0, 0),   -0.5),
    ('2SK2',  0.0831051742, None,    None,                  None),
    ('T2',    0.0832192592, 'S2',    (2, 2, -3, 0, 0, 1),   0.0),
    ('S2',    0.0833333333, 'M2',    (2, 2, -2, 0, 0, 0),   0.0),
    ('R2',    0.0834474074, 'S2',    (2, 2, -1, 0, 0, -1),  -0.5),
    ('K2',    0.0835614924, 'S2',    (2, 2, 0, 0, 0, 0),    0.0),
    ('MSN2',  0.0848454852, 'ETA2',  None,                  None),
    ('ETA2',  0.0850736443, 'K2',    (2, 3, 0, -1, 0, 0),   0.0),
    ('ST7',   0.0853018034, None,    None,                  None),
    ('2SM2',  0.0861552660, None,    None,                  None),
    ('ST38',  0.0863576370, None,    None,                  None),
    ('SKM2',  0.0863834251, None,    None,                  None),
    ('2SN2',  0.0876674179, None,    None,                  None),
    ('NO3',   0.1177299033, None,    None,                  None),
    ('MO3',   0.1192420551, 'M3',    None,                  None),
    ('M3',    0.1207671010, 'M2',    (3, 0, 0, 0, 0, 0),    -0.5),
    ('NK3',   0.1207799950, None,    None,                  None),
    ('SO3',   0.1220639878, 'MK3',   None,                  None),
    ('MK3',   0.1222921469, 'M3',    None,                  None),
    ('SP3',   0.1248859204, None,    None,                  None),
    ('SK3',   0.1251140796, 'MK3',   None,                  None),
    ('ST8',   0.1566887168, None,    None,                  None),
    ('N4',    0.1579984976, None,    None,                  None),
    ('3MS4',  0.1582008687, None,    None,                  None),
    ('ST39',  0.1592824904, None,    None,                  None),
    ('MN4',   0.1595106495, 'M4',    None,                  None),
    ('ST9',   0.1597388086, None,    None,                  None),
    ('ST40',  0.1607946422, None,    None,                  None),
    ('M4',    0.1610228013, 'M3',    None,                  None),
    ('ST10',  0.1612509604, None,    None,                  None),
    ('SN4',   0.1623325821, 'M4',    None,                  None),
    ('KN4',   0.1625607413, None,    None,                  None),
    ('MS4',   0.1638447340, 'M4',    None,                  None),
    ('MK4',   0.1640728931, 'MS4',   None,                  None),
    ('SL4',   0.1653568858, None,    None,                  None),
    ('S4',    0.1666666667, 'MS4',   None,                  None),
    ('SK4',   0.1668948258, 'S4',    None,                  None),
    ('MNO5',  0.1982413039, None,    None,                  None),
    ('2MO5',  0.1997534558, None,    None,                  None),
    ('3MP5',  0.1999816149, None,    None,                  None),
    ('MNK5',  0.2012913957, None,    None,                  None),
    ('2MP5',  0.2025753884, None,    None,                  None),
    ('2MK5',  0.2028035475, 'M4',    None,                  None),
    ('MSK5',  0.2056254802, None,    None,                  None),
    ('3KM5',  0.2058536393, None,    None,                  None),
    ('2SK5',  0.2084474129, '2MK5',  None,                  None),
    ('ST11',  0.2372259056, None,    None,                  None),
    ('2NM6',  0.2385098983, None,    None,                  None),
    ('ST12',  0.2387380574, None,    None,                  None),
    ('2MN6',  0.2400220501, 'M6',    None,                  None),
    ('ST13',  0.2402502093, None,    None,                  None),
    ('ST41',  0.2413060429, None,    None,                  None),
    ('M6',    0.2415342020, '2MK5',  None,                  None),
    ('MSN6',  0.2428439828, None,    None,                  None),
    ('MKN6',  0.2430721419, None,    None,                  None),
    ('ST42',  0.2441279756, None,    None,                  None),
    ('2MS6',  0.2443561347, 'M6',    None,                  None),
    ('2MK6',  0.2445842938, '2MS6',  None,                  None),
    ('NSK6',  0.2458940746, None,    None,                  None),
    ('2SM6',  0.2471780673, '2MS6',  None,                  None),
    ('MSK6',  0.2474062264, '2SM6',  None,                  None),
    ('S6',    0.2500000000, None,    None,                  None),
    ('ST14',  0.2787527046, None,    None,                  None),
    ('ST15',  0.2802906445, None,    None,                  None),
    ('M7',    0.2817899023, None,    None,                  None),
    ('ST16',  0.2830867891, None,    None,                  None),
    ('3MK7',  0.2833149482, 'M6',    None,                  None),
    ('ST17',  0.2861368809, None,    None,                  None),
    ('ST18',  0.3190212990, None,    None,                  None),
    ('3MN8',  0.3205334508, None,    None,                  None),
    ('ST19',  0.3207616099, None,    None,                  None),
    ('M8',    0.3220456027, '3MK7',  None,                  None),
    ('ST20',  0.3233553835, None,    None,                  None),
    ('ST21',  0.3235835426, None,    None,                  None),
    ('3MS8',  0.3248675353, None,    None,                  None),
    ('3MK8',  0.3250956944, None,    None,                  None),
    ('ST22',  0.3264054753, None,    None,                  None),
    ('ST23',  0.3276894680, None,    None,                  None),
    ('ST24',  0.3279176271, None,    None,                  None),
    ('ST25',  0.3608020452, None,    None,                  None),
    ('ST26',  0.3623141970, None,    None,                  None),
    ('4MK9',  0.3638263489, None,    None,                  None),
    ('ST27',  0.3666482815, None,    None,                  None),
    ('ST28',  0.4010448515, None,    None,                  None),
    ('M10',   0.4025570033, None,    None,                  None),
    ('ST29',  0.4038667841, None,    None,                  None),
    ('ST30',  0.4053789360, None,    None,                  None),
    ('ST31',  0.4069168759, None,    None,                  None),
    ('ST32',  0.4082008687, None,    None,                  None),
    ('ST33',  0.4471596822, None,    None,                  None),
    ('M12',   0.4830684040, None,    None,                  None),
    ('ST34',  0.4858903367, None,    None,                  None),
    ('ST35',  0.4874282766, None,    None,                  None),
)

CONSTITUENT_DATABASE: Mapping[str, TidalConstituent] = MappingProxyType({
    row[0]: TidalConstituent(*row) for row in _ROWS
})
"""Read-only lookup of all 146 constituents, in increasing frequency order."""


def get_constituent(name: str) -> TidalConstituent:
    """Look up a constituent by (case-insensitive) name."""
    try:
        return CONSTITUENT_DATABASE[name.strip().upper()]
    except KeyError:
        raise KeyError(f"Unknown tidal constituent '{name}'.") from None
