from .equilibrium import (solve, equilibrium_table, equilibrium_constants, EquilibriumResult,
                          EquilibriumConstants)
