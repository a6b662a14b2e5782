"""
Core build engine.

The extractors recover the map tables from the archive, the merge engine joins
them with the remote feeds, and `BgmDataBuilder` coordinates a full run.
"""
