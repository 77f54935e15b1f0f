"""Traversal core: native finder, directory handles, matcher and engine.

Usage:
    from fsenum.core.engine import TraversalEngine
    from fsenum.config import EnumerationOptions

    engine = TraversalEngine("/data", EnumerationOptions(recursive=True))
    for path in engine:
        print(path)
"""
