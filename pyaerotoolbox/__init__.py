"""
pyaerotoolbox
===================================

---------------------------------------------------------
A collection of Inorganic Aerosol Thermodynamic Utilities
---------------------------------------------------------

Gas / aerosol partitioning of the sulfate - nitrate - ammonium - water system at
thermodynamic equilibrium, intended to be called once per grid cell per chemistry
step by a chemical transport model.

Includes functions to perform simple calculations including;

- Equilibrium composition for ammonia rich and ammonia poor air parcels
- Aerosol liquid water content by the ZSR mixing rule
- Multicomponent ionic activity coefficients (Bromley / Pitzer)
- Real roots of cubic polynomials
- Conversion of tracer masses and evolution of offline HNO3 for transport models


"""

submodules = [
    'activity',
    'classes',
    'constants',
    'cubic',
    'equilibrium',
    'shared_fns',
    'tracer',
    'validate',
    'water'
]

__all__ = submodules 

import importlib

def __dir__():
    return __all__


def __getattr__(name):
    if name in submodules:
        return importlib.import_module(f'pyaerotoolbox.{name}')
    else:
        try:
            return globals()[name]
        except KeyError:
            raise AttributeError(
                f"Module 'pyaerotoolbox' has no attribute '{name}'"
            )
