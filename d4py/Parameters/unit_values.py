class UnitValueLib:
    def __init__(self):
        self.bohr2angstroms = 0.52917721067 #
        self.angstroms2bohr = 1.0 / self.bohr2angstroms

        return

    def length_to_bohr(self, unit):
        """Conversion factor from the given length unit to Bohr"""
        unit = unit.lower()
        if unit in ("bohr", "au", "a.u."):
            return 1.0
        if unit in ("angstrom", "ang", "a"):
            return self.angstroms2bohr
        raise ValueError(f"Unknown length unit: {unit}")
