ELEMENT_SYMBOLS = [
    "H", "He",
    "Li", "Be", "B", "C", "N", "O", "F", "Ne",
    "Na", "Mg", "Al", "Si", "P", "S", "Cl", "Ar",
    "K", "Ca", "Sc", "Ti", "V", "Cr", "Mn", "Fe", "Co", "Ni", "Cu", "Zn",
    "Ga", "Ge", "As", "Se", "Br", "Kr",
    "Rb", "Sr", "Y", "Zr", "Nb", "Mo", "Tc", "Ru", "Rh", "Pd", "Ag", "Cd",
    "In", "Sn", "Sb", "Te", "I", "Xe",
    "Cs", "Ba", "La", "Ce", "Pr", "Nd", "Pm", "Sm", "Eu", "Gd", "Tb", "Dy",
    "Ho", "Er", "Tm", "Yb", "Lu", "Hf", "Ta", "W", "Re", "Os", "Ir", "Pt",
    "Au", "Hg", "Tl", "Pb", "Bi", "Po", "At", "Rn",
    "Fr", "Ra", "Ac", "Th", "Pa", "U", "Np", "Pu", "Am", "Cm", "Bk", "Cf",
    "Es", "Fm", "Md", "No", "Lr", "Rf", "Db", "Sg", "Bh", "Hs", "Mt", "Ds",
    "Rg", "Cn", "Nh", "Fl", "Mc", "Lv", "Ts", "Og",
]

_SYMBOL_TO_NUMBER = {symbol.lower(): z for z, symbol in enumerate(ELEMENT_SYMBOLS, start=1)}


def number_element(number):
    """Element symbol for an atomic number (1-based)"""
    number = int(number)
    if number < 1 or number > len(ELEMENT_SYMBOLS):
        raise ValueError(f"Atomic number {number} out of range [1, {len(ELEMENT_SYMBOLS)}]")
    return ELEMENT_SYMBOLS[number - 1]


def element_number(element):
    """Atomic number for an element symbol (case-insensitive)"""
    try:
        return _SYMBOL_TO_NUMBER[str(element).strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown element symbol: {element}") from None
