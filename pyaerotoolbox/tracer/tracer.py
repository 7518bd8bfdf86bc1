#!/usr/bin/python3
# -*- coding: utf-8 -*-

"""
    pyAeroToolbox - A collection of Aerosol Thermodynamic Utilities
              Copyright (C) 2026, pyAeroToolbox Developers

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU General Public License for more details.

    The GNU General Public License can be found in the LICENSE directory,
    and at  <https://www.gnu.org/licenses/>.
"""

import logging
from typing import Callable, Tuple, Union, Optional

import numpy as np
import numpy.typing as npt

from pyaerotoolbox.equilibrium import solve
from pyaerotoolbox.shared_fns import convert_to_numpy, process_output
from pyaerotoolbox.constants import CONMIN, KG_TO_UG, UG_TO_KG

logger = logging.getLogger(__name__)

RELAX_INTERVAL_MIN = 180  # Relax evolving HNO3 to climatology every 3 hours


def kg_to_ugm3(kg: npt.ArrayLike, airvol: npt.ArrayLike) -> Union[float, np.ndarray]:
    """ Tracer mass (kg) in a grid box of volume airvol (m3) to concentration (ug/m3) """
    kg, is_list = convert_to_numpy(kg)
    airvol, _ = convert_to_numpy(airvol)
    if np.any(airvol <= 0):
        raise ValueError("Air volume must be positive")
    return process_output(kg * KG_TO_UG / airvol, is_list)


def ugm3_to_kg(ugm3: npt.ArrayLike, airvol: npt.ArrayLike) -> Union[float, np.ndarray]:
    """ Concentration (ug/m3) in a grid box of volume airvol (m3) to tracer mass (kg) """
    ugm3, is_list = convert_to_numpy(ugm3)
    airvol, _ = convert_to_numpy(airvol)
    if np.any(airvol <= 0):
        raise ValueError("Air volume must be positive")
    return process_output(ugm3 * airvol * UG_TO_KG, is_list)


class HNO3Store:
    """ Evolving gas phase HNO3 (ug/m3) for each grid cell, for runs without an HNO3 tracer.
        Values evolve freely between steps, but are relaxed back to climatology
        whenever the elapsed model time is a multiple of relax_interval_min.

        shape: Grid shape, e.g. (nx, ny, nz)
        climatology: Callable taking a cell index tuple, returning the monthly mean HNO3 (ug/m3)
        relax_interval_min: Relaxation interval (minutes). Default 180
    """
    def __init__(self, shape: Tuple[int, ...], climatology: Callable[[Tuple[int, ...]], float],
                 relax_interval_min: int = RELAX_INTERVAL_MIN):
        if relax_interval_min <= 0:
            raise ValueError("Relaxation interval must be a positive number of minutes")
        self.shape = tuple(shape)
        self.climatology = climatology
        self.relax_interval_min = relax_interval_min
        self.elapsed_min = 0
        self.values = np.zeros(self.shape)

    def advance(self, elapsed_min: int):
        """ Records the model clock, minutes since the start of the run """
        if elapsed_min < 0:
            raise ValueError("Elapsed time cannot be negative")
        self.elapsed_min = elapsed_min

    @property
    def relaxing(self) -> bool:
        return self.elapsed_min % self.relax_interval_min == 0

    def get(self, cell: Tuple[int, ...]) -> float:
        if self.relaxing:
            return float(self.climatology(cell))
        return float(self.values[cell])

    def set(self, cell: Tuple[int, ...], value: float):
        if value < 0:
            raise ValueError(f"HNO3 concentration cannot be negative, got {value} at {cell}")
        self.values[cell] = value


def equilibrate_cell(so4: float, nh3: float, nh4: float, nit: float, airvol: float, rh_pct: float,
                     temp: float, hno3: Optional[float] = None, store: Optional[HNO3Store] = None,
                     cell: Optional[Tuple[int, ...]] = None) -> dict:
    """ Repartitions ammonia and nitrate tracers of one grid cell to equilibrium
        Returns dictionary of updated tracer masses (kg): 'SO4', 'NH3', 'NH4', 'NIT' and,
        when an HNO3 tracer was supplied, 'HNO3'. Sulfate mass is returned unmodified.

        so4, nh3, nh4, nit: Tracer masses of sulfate, ammonia, ammonium and aerosol nitrate (kg)
        airvol: Grid box volume (m3)
        rh_pct: Relative humidity (%)
        temp: Temperature (deg K)
        hno3: Gas phase HNO3 tracer mass (kg). If None, HNO3 comes from store
        store: HNO3Store used when hno3 is None. Receives the updated gas phase HNO3
        cell: Index of this cell in store
    """
    if hno3 is None and (store is None or cell is None):
        raise ValueError("Either an HNO3 tracer mass or an HNO3Store and cell index must be given")

    so4_c = max(kg_to_ugm3(so4, airvol), CONMIN)
    gnh3 = max(kg_to_ugm3(nh3, airvol), CONMIN)
    anh4 = max(kg_to_ugm3(nh4, airvol), CONMIN)
    ano3 = max(kg_to_ugm3(nit, airvol), CONMIN)
    if hno3 is not None:
        gno3 = max(kg_to_ugm3(hno3, airvol), CONMIN)
    else:
        gno3 = max(store.get(cell), CONMIN)

    res = solve(so4_c, gno3, ano3, gnh3, anh4, rh_pct * 1e-2, temp)
    logger.debug("Cell %s: %s / %s", cell, res.regime.name, res.outcome.name)

    tracers = {'SO4': so4,
               'NH3': max(ugm3_to_kg(res.gnh3, airvol), CONMIN),
               'NH4': max(ugm3_to_kg(res.anh4, airvol), CONMIN),
               'NIT': max(ugm3_to_kg(res.ano3, airvol), CONMIN)}
    if hno3 is not None:
        tracers['HNO3'] = max(ugm3_to_kg(res.gno3, airvol), CONMIN)
    else:
        store.set(cell, res.gno3)
    return tracers
