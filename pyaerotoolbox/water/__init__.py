from .water import water_content, humidity_index
