"""
Repositorios de persistencia.
"""
