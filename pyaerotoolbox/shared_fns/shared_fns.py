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

import numpy as np
import numpy.typing as npt
from typing import Union, List, Tuple

def poly_horner(coeffs, x: float) -> float:
    """ Evaluates c[0] + c[1]*x + ... + c[n]*x**n by nested multiplication """
    y = 0.0
    for c in reversed(coeffs):
        y = c + x * y
    return y

def convert_to_numpy(input_data) -> Tuple[np.ndarray, bool]:
    # Convert input data to a 1D numpy array, flagging whether it started life as a sequence
    if isinstance(input_data, np.ndarray):
        return np.atleast_1d(input_data).astype(float), input_data.size > 1
    if isinstance(input_data, (list, tuple)):
        return np.asarray(input_data, dtype=float), len(input_data) > 1
    return np.atleast_1d(float(input_data)), False

def process_output(output_data: npt.ArrayLike, is_list: bool) -> Union[float, np.ndarray]:
    # Return a scalar when the caller supplied scalars, otherwise the array
    output_data = np.atleast_1d(output_data)
    if is_list:
        return output_data
    return output_data.item()

def broadcast_inputs(*inputs: Union[float, List[float], np.ndarray]) -> Tuple[List[np.ndarray], bool]:
    """ Converts a set of scalar/list inputs into equal length numpy arrays
        Scalars are repeated to the length of the longest input. Returns (arrays, is_list)
    """
    arrays = []
    any_list = False
    for x in inputs:
        arr, is_list = convert_to_numpy(x)
        arrays.append(arr)
        any_list = any_list or is_list
    n = max(len(a) for a in arrays)
    out = []
    for arr in arrays:
        if len(arr) == n:
            out.append(arr)
        elif len(arr) == 1:
            out.append(np.full(n, arr[0]))
        else:
            raise ValueError("Inputs must be scalars or lists of equal length")
    return out, any_list
