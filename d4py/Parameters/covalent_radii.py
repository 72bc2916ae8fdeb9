import numpy as np

from d4py.Parameters.atomic_number import number_element, ELEMENT_SYMBOLS
from d4py.Parameters.unit_values import UnitValueLib


# ref. Pekka Pyykkö; Michiko Atsumi (2009). "Molecular single-bond covalent radii for elements 1 - 118".
# Chemistry: A European Journal 15: 186–197. doi:10.1002/chem.200800987.
# Values for metals decreased by 10 % as in DFT-D3 (H...Xe)
D3_COVALENT_RADII = {
    "H": 0.32, "He": 0.46,
    "Li": 1.20, "Be": 0.94, "B": 0.77, "C": 0.75, "N": 0.71, "O": 0.63, "F": 0.64, "Ne": 0.67,
    "Na": 1.40, "Mg": 1.25, "Al": 1.13, "Si": 1.04, "P": 1.10, "S": 1.02, "Cl": 0.99, "Ar": 0.96,
    "K": 1.76, "Ca": 1.54, "Sc": 1.33, "Ti": 1.22, "V": 1.21, "Cr": 1.10, "Mn": 1.07, "Fe": 1.04,
    "Co": 1.00, "Ni": 0.99, "Cu": 1.01, "Zn": 1.09, "Ga": 1.12, "Ge": 1.09, "As": 1.15, "Se": 1.10,
    "Br": 1.14, "Kr": 1.17,
    "Rb": 1.89, "Sr": 1.67, "Y": 1.47, "Zr": 1.39, "Nb": 1.32, "Mo": 1.24, "Tc": 1.15, "Ru": 1.13,
    "Rh": 1.13, "Pd": 1.08, "Ag": 1.15, "Cd": 1.23, "In": 1.28, "Sn": 1.26, "Sb": 1.26, "Te": 1.23,
    "I": 1.32, "Xe": 1.31,
}


def covalent_radii_lib(element):#single bond, D3 flavour
    if isinstance(element, (int, np.integer)):
        element = number_element(element)
    return D3_COVALENT_RADII[element] / UnitValueLib().bohr2angstroms#Bohr


def _scaled_radii_table():
    # indexed by atomic number, entry 0 unused; NaN marks elements without data
    table = np.full(len(ELEMENT_SYMBOLS) + 1, np.nan)
    for z, symbol in enumerate(ELEMENT_SYMBOLS, start=1):
        if symbol in D3_COVALENT_RADII:
            table[z] = 4.0 / 3.0 * covalent_radii_lib(symbol)
    table.setflags(write=False)
    return table


# 4/3-scaled covalent radii in Bohr used by the counting functions
rcov = _scaled_radii_table()
