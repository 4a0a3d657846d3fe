"""Physical constants used throughout asteroid_tpm."""
from astropy import constants as const

SOLAR_CONST = 1366.0  # Solar constant at 1 AU [W.m-2]
C0 = const.c.value  # Speed of light [m.s-1]
SIGMA_SB = const.sigma_sb.value  # Stefan-Boltzmann constant [W.m-2.K-4]
AU = const.au.value  # Astronomical unit [m]
