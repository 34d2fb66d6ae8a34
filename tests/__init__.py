"""
ion-bridge test suite

Structure:
- unit/: Unit tests for the endpoint pipeline, resources, imagery providers and config
"""
