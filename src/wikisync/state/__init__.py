"""State layer.

Baselines per profile and the diff that is computed against them.
"""
