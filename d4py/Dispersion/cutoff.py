from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class RealSpaceCutoff:
    """Real-space cutoffs in Bohr"""
    disp2: float = 60.0  # two-body dispersion
    disp3: float = 40.0  # three-body dispersion
    cn: float = 30.0  # D4 coordination number
    cn_eeq: float = 25.0  # coordination number for the EEQ model

    def __post_init__(self):
        for name in ("disp2", "disp3", "cn", "cn_eeq"):
            value = getattr(self, name)
            if not np.isfinite(value) or value <= 0.0:
                raise ValueError(f"cutoff '{name}' must be positive and finite, got {value}")
