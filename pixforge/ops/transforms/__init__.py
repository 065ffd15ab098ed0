"""
Geometry engine: one module per transform strategy, dispatched through
:mod:`pixforge.ops.transforms.registry`.
"""
