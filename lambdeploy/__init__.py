"""
lambdeploy - packages, uploads and provisions serverless functions from a
declarative lambda spec, keeping a version history next to the spec.
"""

__version__ = '0.1.0'
