"""
Element data and damping parameters for the DFT-D4 model.

Reference:
- Caldeweyher et al., J. Chem. Phys. 147, 034112 (2017)
- Caldeweyher et al., J. Chem. Phys. 150, 154122 (2019)
"""

from dataclasses import dataclass

import numpy as np

from d4py.errors import MissingParametersError


@dataclass(frozen=True)
class D4Parameters:
    """Rational damping parameters of a density functional (D4, ATM on)"""
    s6: float = 1.0  # Scaling constant for C6 term
    s8: float = 1.20065498  # Scaling constant for C8 term
    s9: float = 1.0  # Scaling constant for three-body term
    a1: float = 0.40085597  # Parameter for damping radius (slope)
    a2: float = 5.02928789  # Parameter for damping radius (offset, Bohr)
    alp: float = 16.0  # Exponent of the three-body zero damping


# Fitted BJ parameters (bj-eeq-atm), keyed by normalised functional name
FUNCTIONAL_PARAMETERS = {
    "hf": D4Parameters(s8=1.61679827, a1=0.44959224, a2=3.35743605),
    "blyp": D4Parameters(s8=2.34076671, a1=0.44488865, a2=4.09330090),
    "pbe": D4Parameters(s8=0.95948085, a1=0.38574991, a2=4.80688534),
    "revpbe": D4Parameters(s8=1.74676530, a1=0.53634900, a2=3.07261485),
    "tpss": D4Parameters(s8=1.91130849, a1=0.43332851, a2=4.56986797),
    "scan": D4Parameters(s8=1.46126056, a1=0.62930855, a2=6.31284039),
    "r2scan": D4Parameters(s8=0.60187490, a1=0.51559235, a2=5.77342911),
    "pbe0": D4Parameters(s8=1.20065498, a1=0.40085597, a2=5.02928789),
    "b3lyp": D4Parameters(s8=2.02929367, a1=0.40868035, a2=4.53807137),
    "tpssh": D4Parameters(s8=1.85897750, a1=0.44286966, a2=4.60230534),
    "b2plyp": D4Parameters(s6=0.64, s8=1.15117773, a1=0.42666167, a2=4.73635790),
}


def normalize_functional_name(name):
    return str(name).strip().lower().replace("-", "").replace("_", "")


def get_damping_parameters(functional):
    """Look up the damping parameters of a density functional by name"""
    key = normalize_functional_name(functional)
    try:
        return FUNCTIONAL_PARAMETERS[key]
    except KeyError:
        raise MissingParametersError(
            f"No D4 damping parameters for functional '{functional}'", stage="parameters"
        ) from None


def _by_atomic_number(values, dtype=float):
    table = np.concatenate([[0], np.asarray(values)]).astype(dtype)
    table.setflags(write=False)
    return table


# <r4>/<r2> expectation values (PBE0/def2-QZVP atomic values, H-Xe)
r4_over_r2 = _by_atomic_number([
    8.0589, 3.4698,
    29.0974, 14.8517, 11.8799, 7.8715, 5.5588, 4.7566, 3.8025, 3.1036,
    26.1552, 17.2304, 17.7210, 12.7442, 9.5361, 8.1652, 6.7463, 5.6004,
    29.2012, 22.3934,
    19.0598, 16.8590, 15.4023, 12.5589, 13.4788, 12.2309, 11.2809, 10.5569, 10.1428, 9.4907,
    13.4606, 10.8544, 8.9386, 8.1350, 7.1251, 6.1971,
    30.0162, 24.4103,
    20.3537, 17.4780, 13.5528, 11.8451, 11.0355, 10.1997, 9.5414, 9.0061, 8.6417, 8.9975,
    14.0834, 11.8333, 10.0179, 9.3844, 8.4110, 7.5152,
])

# sqrt(0.5 * <r4>/<r2> * sqrt(Z)), enters C8 and the critical radius
_z = np.arange(len(r4_over_r2), dtype=float)
r4r2 = np.sqrt(0.5 * r4_over_r2 * np.sqrt(_z))
r4r2.setflags(write=False)

# Pauling electronegativities as used in the D4 coordination number
pauling_en = _by_atomic_number([
    1.92, 3.00, 0.98, 1.57, 2.04, 2.48, 2.97, 3.44, 3.50, 3.50,
    0.93, 1.31, 1.61, 1.90, 2.19, 2.58, 3.16, 3.50, 1.45, 1.80,
    1.73, 1.54, 1.63, 1.66, 1.55, 1.83, 1.88, 1.91, 1.90, 1.65,
    1.81, 2.01, 2.18, 2.55, 2.96, 3.00, 1.50, 1.50, 1.55, 1.33,
    1.60, 2.16, 1.90, 2.20, 2.28, 2.20, 1.93, 1.69, 1.78, 1.96,
    2.05, 2.10, 2.66, 2.60,
])

# Chemical hardness used by the charge scaling function
chemical_hardness = _by_atomic_number([
    0.47259288, 0.92203391, 0.17452888, 0.25700733, 0.33949086,
    0.42195412, 0.50438193, 0.58691863, 0.66931351, 0.75191607,
    0.17964105, 0.22157276, 0.26348578, 0.30539645, 0.34734014,
    0.38924725, 0.43115670, 0.47308269, 0.17105469, 0.20276244,
    0.21007322, 0.21739647, 0.22471039, 0.23201501, 0.23933969,
    0.24665638, 0.25398255, 0.26128863, 0.26859476, 0.27592565,
    0.30762999, 0.33931580, 0.37235985, 0.40273549, 0.43445776,
    0.46611708, 0.15585079, 0.18649324, 0.19356210, 0.20063311,
    0.20770522, 0.21477254, 0.22184614, 0.22891872, 0.23598621,
    0.24305612, 0.25013018, 0.25719937, 0.28784780, 0.31848673,
    0.34912431, 0.37976593, 0.41040808, 0.44105777,
])

# Effective nuclear charges (valence-only beyond Kr)
effective_nuclear_charge = _by_atomic_number([
    1, 2,                                               # H-He
    3, 4, 5, 6, 7, 8, 9, 10,                            # Li-Ne
    11, 12, 13, 14, 15, 16, 17, 18,                     # Na-Ar
    19, 20, 21, 22, 23, 24, 25, 26, 27, 28, 29, 30,     # K-Zn
    31, 32, 33, 34, 35, 36,                             # Ga-Kr
    9, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20,      # Rb-Cd
    21, 22, 23, 24, 25, 26,                             # In-Xe
])

D4_MAX_ELEM = len(r4_over_r2) - 1
