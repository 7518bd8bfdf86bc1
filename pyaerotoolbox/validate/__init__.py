from .validate import validate_concentrations
