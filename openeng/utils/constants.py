"""
Physical constants in SI units, taken from scipy.constants (CODATA).
"""

import scipy.constants as sc


class PhysicalConstants:
    """Namespace of commonly used physical constants (SI)."""

    SPEED_OF_LIGHT = sc.c                     # m/s
    GRAVITY = sc.g                            # m/s^2, standard gravity
    PLANCK = sc.h                             # J s
    BOLTZMANN = sc.k                          # J/K
    AVOGADRO = sc.N_A                         # 1/mol
    GAS_CONSTANT = sc.R                       # J/(mol K)
    ELEMENTARY_CHARGE = sc.e                  # C
    ELECTRON_MASS = sc.m_e                    # kg
    PROTON_MASS = sc.m_p                      # kg
    VACUUM_PERMITTIVITY = sc.epsilon_0        # F/m
    VACUUM_PERMEABILITY = sc.mu_0             # H/m

    def __init__(self) -> None:
        raise TypeError("PhysicalConstants is a namespace and cannot be instantiated")
