import numpy as np

from d4py.errors import MissingParametersError
from d4py.Parameters.unit_values import UnitValueLib
from d4py.Parameters.atomic_number import number_element, element_number, ELEMENT_SYMBOLS
from d4py.Parameters.covalent_radii import covalent_radii_lib, rcov
from d4py.Parameters.eeq import eeq_chi, eeq_gam, eeq_kcn, eeq_alp, EEQ_MAX_ELEM
from d4py.Parameters.d4 import (
    D4Parameters,
    FUNCTIONAL_PARAMETERS,
    get_damping_parameters,
    r4_over_r2,
    r4r2,
    pauling_en,
    chemical_hardness,
    effective_nuclear_charge,
    D4_MAX_ELEM,
)
from d4py.Parameters.reference import ReferenceDatabase, reference_db, FREQ, FREQ_WEIGHTS

MAX_ELEM = min(D4_MAX_ELEM, EEQ_MAX_ELEM)


def check_supported_elements(numbers):
    """Raise MissingParametersError naming every atom whose element has no parameters"""
    numbers = np.asarray(numbers)
    bad = np.flatnonzero((numbers < 1) | (numbers > MAX_ELEM))
    if len(bad) > 0:
        labels = []
        for i in bad:
            try:
                labels.append(f"{number_element(numbers[i])}(atom {i})")
            except ValueError:
                labels.append(f"Z={numbers[i]}(atom {i})")
        raise MissingParametersError(
            f"Unsupported element(s): {', '.join(labels)}; parameters cover Z=1..{MAX_ELEM}",
            stage="parameters",
            atoms=bad,
        )
    return numbers
