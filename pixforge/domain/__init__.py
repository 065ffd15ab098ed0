"""
Domain layer: request models, value types and the error taxonomy.
"""
