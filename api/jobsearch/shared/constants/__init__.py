"""
Constantes del dominio de sincronizacion.
"""
