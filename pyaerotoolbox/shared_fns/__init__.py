from .shared_fns import poly_horner, convert_to_numpy, process_output, broadcast_inputs
