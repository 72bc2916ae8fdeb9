"""
Electronegativity equilibration (EEQ) parameters, H-Xe.

All tables are indexed by atomic number; entry 0 is a NaN placeholder so that
``eeq_chi[numbers]`` works directly on an array of atomic numbers.
"""

import numpy as np


def _by_atomic_number(values):
    table = np.concatenate([[np.nan], np.asarray(values, dtype=float)])
    table.setflags(write=False)
    return table


# Electronegativity (chi)
eeq_chi = _by_atomic_number([
    1.2500000, 1.2912463, 0.8540050, 1.1723939, 1.1094487,
    1.3860275, 1.5341534, 1.5378836, 1.5890750, 1.2893646,
    0.7891208, 0.9983021, 0.9620847, 1.0441134, 1.4789559,
    1.3926377, 1.4749100, 1.2250415, 0.8162292, 1.1252036,
    0.9641451, 0.8810155, 0.9741986, 1.1029038, 1.0076949,
    0.7744353, 0.7554040, 1.0182630, 1.0316167, 1.6317474,
    1.1186739, 1.0345958, 1.3090772, 1.4119283, 1.4500674,
    1.1746889, 0.6686200, 1.0744648, 0.9107813, 0.7876056,
    1.0039889, 0.9225265, 0.9035515, 1.0332301, 1.0293975,
    1.0549549, 1.2356867, 1.2793315, 1.1145650, 1.1214927,
    1.2123167, 1.4003158, 1.4255511, 1.1640198,
])

# Chemical hardness (gam)
eeq_gam = _by_atomic_number([
    -0.3023159, 0.7743046, 0.5303164, 0.2176474, 0.1956176,
    0.0308461, 0.0559522, 0.0581228, 0.1574017, 0.6825784,
    0.3922376, 0.5581866, 0.3017510, 0.1039137, 0.2124917,
    0.0580720, 0.2537467, 0.5780354, 0.3920658, -0.0024897,
    -0.0061520, 0.1663252, 0.1051751, 0.0009900, 0.0976543,
    0.0612028, 0.0561526, 0.0899774, 0.1313171, 0.5728071,
    0.1741615, 0.2671888, 0.2351989, 0.0718104, 0.3458143,
    0.8203265, 0.4287770, 0.2667067, 0.0873658, 0.0599431,
    0.1581972, 0.1716374, 0.2721649, 0.2817608, 0.1391572,
    0.1175925, 0.2316104, 0.2256303, 0.1230459, 0.0141941,
    0.0188612, 0.0230207, 0.3644113, 0.1668461,
])

# CN dependence of the electronegativity (kcn)
eeq_kcn = _by_atomic_number([
    0.0248762, 0.1342276, 0.0103048, -0.0352374, -0.0980031,
    0.0643920, 0.1053273, 0.1394809, 0.1276675, -0.1081936,
    -0.0008132, -0.0279860, -0.0521436, -0.0257206, 0.1651461,
    0.0914418, 0.1213634, -0.0636298, -0.0045838, 0.0007509,
    -0.0307730, -0.0286150, -0.0341465, -0.0419655, -0.0088536,
    -0.1001069, -0.1190502, -0.0726233, -0.0219233, 0.0641913,
    -0.0103130, 0.0262628, 0.0222202, 0.0709954, 0.0422244,
    -0.0308245, 0.0086249, -0.0237146, -0.0721798, -0.0848810,
    -0.0402828, -0.0372396, -0.0027043, 0.0525839, 0.0051192,
    0.0188401, 0.0103998, 0.0000549, 0.0087717, -0.0237228,
    0.0169656, 0.0924186, 0.0352884, -0.0091444,
])

# Charge widths (alp)
eeq_alp = _by_atomic_number([
    0.7490227, 0.4196569, 1.4256190, 2.0698743, 1.7358798,
    1.8288757, 1.9346081, 1.6974795, 0.8169179, 0.6138441,
    1.7294046, 1.7925036, 1.2156739, 1.5314457, 1.3730859,
    1.7936326, 2.4255996, 1.5891656, 2.1829647, 1.4177623,
    1.5181399, 1.9919805, 1.7171675, 2.0655063, 1.3318009,
    1.3660068, 1.5694128, 1.2762644, 1.0039549, 0.7338863,
    3.2596250, 1.7530299, 1.5281792, 2.1837813, 2.1642027,
    2.7280594, 0.7838049, 1.4274742, 1.8023947, 1.6093288,
    1.3834349, 1.1740977, 1.5768259, 1.3205263, 1.4259466,
    1.1499748, 0.7013009, 1.2374416, 1.3799991, 1.8528424,
    1.8497568, 2.0159294, 1.2903708, 2.0199161,
])

EEQ_MAX_ELEM = len(eeq_chi) - 1
