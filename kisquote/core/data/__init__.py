"""Instrument catalogs, proxy table and upstream quote clients."""
