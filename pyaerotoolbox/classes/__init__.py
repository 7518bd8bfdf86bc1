from .classes import eq_regime, eq_outcome
