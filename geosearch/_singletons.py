# geosearch/_singletons.py
from functools import lru_cache
from .catalog_build import load_catalog

@lru_cache(maxsize=1)
def get_catalog():
    # immutable tuple of CatalogEntry, loaded once per process
    return load_catalog()
