from .tracer import kg_to_ugm3, ugm3_to_kg, HNO3Store, equilibrate_cell
