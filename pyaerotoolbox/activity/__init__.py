from .activity import activity_coefficients, ionic_strength, osmotic_coefficient
from .activity import BETA0, BETA1, CGAMA, V1, V2, GAMMA_MAX
