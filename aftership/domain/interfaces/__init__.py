"""Domain Interfaces: abstract contracts implemented by the infrastructure layer.
"""
